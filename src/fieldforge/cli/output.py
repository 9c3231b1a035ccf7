"""Shared helpers for CLI commands."""

import json
from datetime import date
from pathlib import Path
from typing import Any

import click
import yaml

from fieldforge.config import FieldForgeConfig
from fieldforge.errors import SchemaConfigurationError
from fieldforge.metadata.loader import SchemaLoader
from fieldforge.validation.coercion import format_iso


def _json_default(value: Any) -> Any:
    if isinstance(value, date):
        return format_iso(value)
    if isinstance(value, (set, tuple)):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, default=_json_default))


def read_document(path: Path) -> Any:
    """Read a JSON or YAML file (JSON is valid YAML)."""
    with open(path) as f:
        try:
            return yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise click.BadParameter(f"{path} is not valid JSON/YAML: {e}") from e


def load_schemas(config: FieldForgeConfig) -> SchemaLoader:
    if not config.metadata_path.exists():
        click.echo(f"Error: Metadata directory not found at {config.metadata_path}", err=True)
        raise SystemExit(1)

    loader = SchemaLoader(config.metadata_path)
    try:
        loader.load_all()
    except SchemaConfigurationError as e:
        click.echo(click.style(f"Schema error: {e}", fg="red"), err=True)
        raise SystemExit(1)
    return loader
