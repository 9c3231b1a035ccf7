"""Load field schemas and filter field configurations from YAML files."""

import logging
import math
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml

from fieldforge.core.types import FieldType, FilterFieldType, FilterOperator
from fieldforge.errors import SchemaConfigurationError

logger = logging.getLogger(__name__)


class _NoDefault:
    """Marker for a field that declares no default value."""

    def __repr__(self) -> str:
        return "NO_DEFAULT"


NO_DEFAULT: Any = _NoDefault()


@dataclass(frozen=True)
class ValidationRules:
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None
    min_value: Any = None  # number, or date-constructible for date fields
    max_value: Any = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ValidationRules":
        return cls(
            min_length=data.get("minLength"),
            max_length=data.get("maxLength"),
            pattern=data.get("pattern"),
            min_value=data.get("minValue"),
            max_value=data.get("maxValue"),
        )

    def to_dict(self) -> dict[str, Any]:
        result = {
            "minLength": self.min_length,
            "maxLength": self.max_length,
            "pattern": self.pattern,
            "minValue": self.min_value,
            "maxValue": self.max_value,
        }
        return {k: v for k, v in result.items() if v is not None}


@dataclass(frozen=True)
class FieldDefinition:
    """One entry of a custom field schema.

    Attributes:
        key: Lookup key in the raw input and the output record
        type: The type values are coerced to
        label: Presentation only
        placeholder: Presentation only
        description: Presentation only
        required: Whether an empty value is an error
        default_value: Substituted when coercion yields None; NO_DEFAULT if undeclared
        validation: Optional string/numeric/date constraints
    """

    key: str
    type: FieldType
    label: str = ""
    placeholder: str | None = None
    description: str | None = None
    required: bool = False
    default_value: Any = NO_DEFAULT
    validation: ValidationRules | None = None

    @property
    def has_default(self) -> bool:
        return self.default_value is not NO_DEFAULT

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FieldDefinition":
        """Create a FieldDefinition from a YAML/JSON dict.

        Raises:
            SchemaConfigurationError: If the key is missing, the type is unknown,
                or a number field declares a non-numeric bound.
        """
        key = data.get("key")
        if not key:
            raise SchemaConfigurationError("Field definition has no key")

        type_name = data.get("type", "text")
        try:
            field_type = FieldType(type_name)
        except ValueError:
            raise SchemaConfigurationError(
                f"Field '{key}' has unknown type '{type_name}'"
            ) from None

        validation = None
        if data.get("validation"):
            validation = ValidationRules.from_dict(data["validation"])
            if field_type == FieldType.NUMBER:
                validation = replace(
                    validation,
                    min_value=numeric_bound(key, "minValue", validation.min_value),
                    max_value=numeric_bound(key, "maxValue", validation.max_value),
                )

        return cls(
            key=key,
            type=field_type,
            label=data.get("label", _to_label(key)),
            placeholder=data.get("placeholder"),
            description=data.get("description"),
            required=bool(data.get("required", False)),
            default_value=data["defaultValue"] if "defaultValue" in data else NO_DEFAULT,
            validation=validation,
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "key": self.key,
            "label": self.label,
            "type": self.type.value,
            "required": self.required,
        }
        if self.placeholder is not None:
            result["placeholder"] = self.placeholder
        if self.description is not None:
            result["description"] = self.description
        if self.has_default:
            result["defaultValue"] = self.default_value
        if self.validation is not None:
            result["validation"] = self.validation.to_dict()
        return result


@dataclass(frozen=True)
class FilterOption:
    value: str | int | float
    label: str


@dataclass(frozen=True)
class FilterFieldConfig:
    """A filterable field offered to the filter builder."""

    key: str
    label: str
    type: FilterFieldType
    operators: tuple[FilterOperator, ...] | None = None
    options: tuple[FilterOption, ...] | None = None
    placeholder: str | None = None
    required: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FilterFieldConfig":
        """Create a FilterFieldConfig from a YAML/JSON dict.

        Raises:
            SchemaConfigurationError: On a missing key or unknown type/operator.
        """
        key = data.get("key")
        if not key:
            raise SchemaConfigurationError("Filter field has no key")

        try:
            field_type = FilterFieldType(data.get("type", "string"))
            operators = data.get("operators")
            if operators is not None:
                operators = tuple(FilterOperator(op) for op in operators)
        except ValueError as e:
            raise SchemaConfigurationError(f"Filter field '{key}': {e}") from None

        options = data.get("options")
        if options is not None:
            options = tuple(
                FilterOption(value=opt["value"], label=opt.get("label", str(opt["value"])))
                for opt in options
            )

        return cls(
            key=key,
            label=data.get("label", _to_label(key)),
            type=field_type,
            operators=operators,
            options=options,
            placeholder=data.get("placeholder"),
            required=bool(data.get("required", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "key": self.key,
            "label": self.label,
            "type": self.type.value,
        }
        if self.operators is not None:
            result["operators"] = [op.value for op in self.operators]
        if self.options is not None:
            result["options"] = [{"value": o.value, "label": o.label} for o in self.options]
        if self.placeholder is not None:
            result["placeholder"] = self.placeholder
        if self.required:
            result["required"] = True
        return result


def numeric_bound(key: str, name: str, value: Any) -> int | float | None:
    """Read a number field bound, accepting numeric strings such as "10".

    Raises:
        SchemaConfigurationError: If the bound is not a finite number.
    """
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if math.isfinite(value):
            return value
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            pass
        else:
            if math.isfinite(number):
                return int(number) if number.is_integer() else number
    raise SchemaConfigurationError(f"Field '{key}' has a non-numeric {name} {value!r}")


def _to_label(key: str) -> str:
    """Convert camelCase to Title Case."""
    result = []
    for i, char in enumerate(key):
        if char.isupper() and i > 0:
            result.append(" ")
        result.append(char)
    return "".join(result).title()


def _ensure_unique(keys: list[str], owner: str) -> None:
    seen: set[str] = set()
    for key in keys:
        if key in seen:
            raise SchemaConfigurationError(f"Duplicate key '{key}' in {owner}")
        seen.add(key)


def resolve_fields(data: list[dict[str, Any]], owner: str = "schema") -> list[FieldDefinition]:
    """Convert a list of field dicts, enforcing unique keys."""
    fields = [FieldDefinition.from_dict(f) for f in data]
    _ensure_unique([f.key for f in fields], owner)
    return fields


def resolve_filter_fields(
    data: list[dict[str, Any]], owner: str = "filter set"
) -> list[FilterFieldConfig]:
    """Convert a list of filter field dicts, enforcing unique keys."""
    configs = [FilterFieldConfig.from_dict(f) for f in data]
    _ensure_unique([c.key for c in configs], owner)
    return configs


class SchemaLoader:
    """Loads field schemas and filter sets from a metadata directory.

    Layout:
        fields/*.yaml   - ``schema: <name>`` with a ``fields`` list
        filters/*.yaml  - ``filters: <name>`` with a ``fields`` list
    """

    def __init__(self, metadata_path: Path):
        self.metadata_path = metadata_path
        self.schemas: dict[str, list[FieldDefinition]] = {}
        self.filter_sets: dict[str, list[FilterFieldConfig]] = {}

    def load_all(self) -> None:
        """Load all field schemas and filter sets."""
        self._load_schemas()
        self._load_filter_sets()

    def _load_schemas(self) -> None:
        for name, data in self._iter_documents("fields", "schema"):
            if name in self.schemas:
                raise SchemaConfigurationError(f"Duplicate schema '{name}'")
            self.schemas[name] = resolve_fields(
                data.get("fields") or [], owner=f"schema '{name}'"
            )

    def _load_filter_sets(self) -> None:
        for name, data in self._iter_documents("filters", "filters"):
            if name in self.filter_sets:
                raise SchemaConfigurationError(f"Duplicate filter set '{name}'")
            self.filter_sets[name] = resolve_filter_fields(
                data.get("fields") or [], owner=f"filter set '{name}'"
            )

    def _iter_documents(self, subdir: str, name_key: str):
        directory = self.metadata_path / subdir
        if not directory.exists():
            return

        for yaml_file in sorted(directory.glob("*.yaml")):
            with open(yaml_file) as f:
                data = yaml.safe_load(f)
            if not data or name_key not in data:
                logger.warning("Skipping %s: no '%s' key", yaml_file, name_key)
                continue
            yield data[name_key], data

    def get_schema(self, name: str) -> list[FieldDefinition] | None:
        """Get a field schema by name."""
        return self.schemas.get(name)

    def get_filter_set(self, name: str) -> list[FilterFieldConfig] | None:
        """Get a filter set by name."""
        return self.filter_sets.get(name)

    def list_schemas(self) -> list[str]:
        return list(self.schemas.keys())

    def list_filter_sets(self) -> list[str]:
        return list(self.filter_sets.keys())
