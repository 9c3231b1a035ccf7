"""Structural checks for the YAML files of a metadata directory.

Each subdirectory has a bundled JSON Schema:

    fields/*.yaml   -> fields.schema.json
    filters/*.yaml  -> filters.schema.json
    views/*.yaml    -> view.schema.json

The shared definitions live in ``_defs.schema.json`` and are resolved
through a ``referencing`` registry. Findings are returned, never raised, so
the CLI can print every problem in one run.

Usage:
    from fieldforge.metadata.validator import validate_metadata_dir

    for issue in validate_metadata_dir(Path("metadata")):
        print(issue)
"""
from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator
from referencing import Registry
from referencing.jsonschema import DRAFT202012

logger = logging.getLogger(__name__)

SCHEMA_DIR = Path(__file__).parent / "schemas"
SHARED_DEFINITIONS = "_defs.schema.json"

SCHEMA_BY_SUBDIR: dict[str, str] = {
    "fields": "fields.schema.json",
    "filters": "filters.schema.json",
    "views": "view.schema.json",
}

ERROR = "error"
WARNING = "warning"


@dataclass(frozen=True)
class ValidationIssue:
    """One problem found in a metadata file.

    Attributes:
        file: The offending file (or directory)
        message: What is wrong
        path: Location inside the document, e.g. "fields[0]/type"; empty for the whole file
        severity: "error" or "warning"
    """

    file: Path
    message: str
    path: str = ""
    severity: str = ERROR

    @property
    def is_error(self) -> bool:
        return self.severity == ERROR

    def as_error(self) -> ValidationIssue:
        return replace(self, severity=ERROR)

    def __str__(self) -> str:
        where = f"{self.file} at {self.path}" if self.path else str(self.file)
        return f"[{self.severity.upper()}] {where}: {self.message}"


def _read_schema(name: str) -> dict[str, Any]:
    return json.loads((SCHEMA_DIR / name).read_text())


@lru_cache(maxsize=1)
def schema_registry() -> Registry:
    """The bundled schemas, addressable by their ``$id``."""
    names = [SHARED_DEFINITIONS, *SCHEMA_BY_SUBDIR.values()]
    return Registry().with_resources(
        (schema["$id"], DRAFT202012.create_resource(schema))
        for schema in map(_read_schema, names)
    )


def _location(parts: Iterable[str | int]) -> str:
    """Render a document path as ``fields[0]/validation/minValue``."""
    location = ""
    for part in parts:
        if isinstance(part, int):
            location += f"[{part}]"
        else:
            location += f"/{part}" if location else str(part)
    return location


def _schema_issues(file: Path, doc: Any, schema_name: str, registry: Registry) -> list[ValidationIssue]:
    validator = Draft202012Validator(_read_schema(schema_name), registry=registry)
    issues = [
        ValidationIssue(file=file, message=e.message, path=_location(e.absolute_path))
        for e in validator.iter_errors(doc)
    ]
    return sorted(issues, key=lambda issue: issue.path)


def _duplicate_key_issues(file: Path, doc: dict[str, Any]) -> list[ValidationIssue]:
    """Keys must be unique within a field schema or filter set."""
    issues = []
    seen: set[str] = set()
    for i, entry in enumerate(doc.get("fields") or []):
        key = entry.get("key") if isinstance(entry, dict) else None
        if key is None:
            continue
        if key in seen:
            issues.append(
                ValidationIssue(
                    file=file,
                    message=f"Duplicate key '{key}'",
                    path=f"fields[{i}]/key",
                )
            )
        seen.add(key)
    return issues


def schema_for_path(yaml_path: Path) -> str | None:
    """The schema filename for a YAML file, inferred from its parent directory."""
    return SCHEMA_BY_SUBDIR.get(yaml_path.parent.name)


def validate_yaml_file(
    yaml_path: Path,
    schema_name: str,
    *,
    registry: Registry | None = None,
) -> list[ValidationIssue]:
    """Check one YAML file against the named bundled schema.

    Unparseable and empty files are reported as a single issue; otherwise
    every schema violation is reported, followed by duplicate field keys.
    """
    try:
        doc = yaml.safe_load(yaml_path.read_text())
    except yaml.YAMLError as exc:
        return [ValidationIssue(file=yaml_path, message=f"YAML parse error: {exc}")]

    if doc is None:
        return [
            ValidationIssue(file=yaml_path, message="File is empty or contains only whitespace")
        ]

    issues = _schema_issues(yaml_path, doc, schema_name, registry or schema_registry())
    if isinstance(doc, dict):
        issues.extend(_duplicate_key_issues(yaml_path, doc))
    return issues


def _stray_extension_issues(directory: Path) -> list[ValidationIssue]:
    return [
        ValidationIssue(
            file=path,
            message="Ignored: metadata files must use the .yaml extension",
            severity=WARNING,
        )
        for path in sorted(directory.glob("*.yml"))
    ]


def validate_metadata_dir(
    metadata_dir: Path,
    *,
    strict: bool = False,
) -> list[ValidationIssue]:
    """Check every ``.yaml`` file under ``fields/``, ``filters/`` and ``views/``.

    ``.yml`` files are not loaded by the schema loaders and are reported as
    warnings; ``strict`` turns those warnings into errors. An empty list
    means the directory is valid.
    """
    if not metadata_dir.is_dir():
        return [
            ValidationIssue(
                file=metadata_dir,
                message=f"Metadata directory does not exist: {metadata_dir}",
            )
        ]

    try:
        registry = schema_registry()
    except (OSError, json.JSONDecodeError) as exc:
        return [ValidationIssue(file=SCHEMA_DIR, message=f"Cannot read bundled schemas: {exc}")]

    issues: list[ValidationIssue] = []
    for subdir, schema_name in SCHEMA_BY_SUBDIR.items():
        directory = metadata_dir / subdir
        if not directory.is_dir():
            continue
        issues.extend(_stray_extension_issues(directory))
        for yaml_file in sorted(directory.glob("*.yaml")):
            issues.extend(validate_yaml_file(yaml_file, schema_name, registry=registry))

    if strict:
        issues = [issue.as_error() for issue in issues]

    logger.debug("Checked %s: %d issue(s)", metadata_dir, len(issues))
    return issues
