"""FieldForge CLI entry point."""

import logging
from pathlib import Path

import click

from fieldforge.config import FieldForgeConfig


@click.group()
@click.option(
    "--metadata-path",
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help="Metadata directory (defaults to $FIELDFORGE_METADATA_PATH or ./metadata).",
)
@click.pass_context
def cli(ctx: click.Context, metadata_path: Path | None):
    """FieldForge: schema-driven custom fields and filter queries."""
    config = FieldForgeConfig.from_env()
    if metadata_path is not None:
        config.metadata_path = metadata_path
    logging.basicConfig(
        level=config.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = config


# Register subcommand groups
from fieldforge.cli.fields_cmd import fields  # noqa: E402
from fieldforge.cli.filters_cmd import filters  # noqa: E402
from fieldforge.cli.metadata_cmd import metadata  # noqa: E402

cli.add_command(fields)
cli.add_command(filters)
cli.add_command(metadata)
