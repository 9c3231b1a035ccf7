"""Custom field CLI commands: process and show."""

from pathlib import Path

import click

from fieldforge.cli.output import echo_json, load_schemas, read_document
from fieldforge.config import FieldForgeConfig
from fieldforge.errors import SchemaConfigurationError
from fieldforge.validation import evaluate_custom_fields


@click.group()
def fields():
    """Custom field commands."""
    pass


@fields.command()
@click.argument("schema_name")
@click.argument(
    "data_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.pass_obj
def process(config: FieldForgeConfig, schema_name: str, data_file: Path):
    """Coerce and validate DATA_FILE against the named field schema."""
    loader = load_schemas(config)
    schema = loader.get_schema(schema_name)
    if schema is None:
        click.echo(f"Error: Unknown schema '{schema_name}'", err=True)
        raise SystemExit(1)

    raw_data = read_document(data_file)
    if not isinstance(raw_data, dict):
        click.echo("Error: Data file must contain a mapping of field keys to values", err=True)
        raise SystemExit(1)

    try:
        result = evaluate_custom_fields(schema, raw_data)
    except SchemaConfigurationError as e:
        click.echo(click.style(f"Schema error: {e}", fg="red"), err=True)
        raise SystemExit(1)

    if not result.valid:
        for error in result.errors:
            click.echo(click.style(f"  ✗ {error.field}: {error.message}", fg="red"), err=True)
        click.echo(
            click.style(f"\n{len(result.errors)} field error(s)", fg="red", bold=True),
            err=True,
        )
        raise SystemExit(1)

    echo_json(result.record)


@fields.command()
@click.argument("schema_name")
@click.pass_obj
def show(config: FieldForgeConfig, schema_name: str):
    """Print the resolved field schema as JSON."""
    loader = load_schemas(config)
    schema = loader.get_schema(schema_name)
    if schema is None:
        click.echo(f"Error: Unknown schema '{schema_name}'", err=True)
        raise SystemExit(1)

    echo_json([f.to_dict() for f in schema])
