"""Metadata CLI commands: validate."""

from pathlib import Path

import click

from fieldforge.config import FieldForgeConfig
from fieldforge.errors import SchemaConfigurationError
from fieldforge.metadata.loader import SchemaLoader
from fieldforge.metadata.validator import (
    schema_for_path,
    validate_metadata_dir,
    validate_yaml_file,
)
from fieldforge.views import ViewConfigLoader


@click.group()
def metadata():
    """Metadata commands."""
    pass


@metadata.command()
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Treat warnings as errors.",
)
@click.option(
    "--path",
    "target_path",
    default=None,
    type=click.Path(exists=True, path_type=Path),
    help="Validate a single YAML file instead of the whole metadata directory.",
)
@click.pass_obj
def validate(config: FieldForgeConfig, strict: bool, target_path: Path | None):
    """Validate metadata YAML files against JSON Schemas."""
    metadata_path = config.metadata_path

    # ── Schema (JSON Schema) validation ─────────────────────────────────────
    if target_path is not None:
        # Single-file mode: infer schema from parent directory name
        schema_name = schema_for_path(target_path)
        if schema_name is None:
            click.echo(
                f"Warning: cannot determine schema for directory '{target_path.parent.name}'. "
                "Expected one of: fields, filters, views.",
                err=True,
            )
            schema_issues = []
        else:
            schema_issues = validate_yaml_file(target_path, schema_name)
    else:
        if not metadata_path.exists():
            click.echo(f"Error: Metadata directory not found at {metadata_path}", err=True)
            raise SystemExit(1)
        schema_issues = validate_metadata_dir(metadata_path, strict=strict)

    # Report schema issues
    errors = [i for i in schema_issues if i.is_error]
    warnings = [i for i in schema_issues if not i.is_error]

    for issue in schema_issues:
        colour = "red" if issue.is_error else "yellow"
        click.echo(click.style(str(issue), fg=colour))

    if errors:
        click.echo(
            click.style(
                f"\n{len(errors)} schema error(s) found"
                + (f", {len(warnings)} warning(s)" if warnings else ""),
                fg="red",
                bold=True,
            )
        )
        raise SystemExit(1)

    if warnings:
        click.echo(
            click.style(f"{len(warnings)} warning(s) found.", fg="yellow")
        )

    # ── Semantic (loader) validation ─────────────────────────────────────────
    # Only runs when validating the full directory (target_path is None)
    if target_path is None:
        try:
            loader = SchemaLoader(metadata_path)
            loader.load_all()
        except SchemaConfigurationError as e:
            click.echo(click.style(f"\nSemantic validation failed: {e}", fg="red"), err=True)
            raise SystemExit(1)

        view_loader = ViewConfigLoader(metadata_path / "views")
        view_loader.load_all()

        schemas = loader.list_schemas()
        click.echo(f"\nLoaded {len(schemas)} field schema(s):")
        for name in sorted(schemas):
            click.echo(f"  ✓ {name} ({len(loader.get_schema(name) or [])} fields)")

        filter_sets = loader.list_filter_sets()
        click.echo(f"Loaded {len(filter_sets)} filter set(s):")
        for name in sorted(filter_sets):
            click.echo(f"  ✓ {name} ({len(loader.get_filter_set(name) or [])} fields)")

        click.echo(f"Loaded {len(view_loader.list_views())} view(s).")

    click.echo(click.style("\nAll metadata is valid.", fg="green", bold=True))
