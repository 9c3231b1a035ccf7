"""Filter CLI commands: build, parse and list operators."""

from pathlib import Path
from urllib.parse import parse_qs

import click

from fieldforge.cli.output import echo_json, load_schemas, read_document
from fieldforge.config import FieldForgeConfig
from fieldforge.filters import (
    FilterCondition,
    available_operators,
    build_complete_query,
    parse_query,
)
from fieldforge.views import ViewConfigLoader


@click.group()
def filters():
    """Filter query commands."""
    pass


def _conditions_from_file(path: Path) -> list[FilterCondition]:
    data = read_document(path)
    if isinstance(data, dict):
        data = data.get("conditions", [])
    if not isinstance(data, list):
        raise click.BadParameter(f"{path} must contain a list of conditions")
    try:
        return [FilterCondition.from_dict(c) for c in data]
    except (KeyError, TypeError, AttributeError) as e:
        raise click.BadParameter(f"{path} has a malformed condition: {e}") from e


@filters.command()
@click.argument(
    "conditions_file",
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option("--view", "view_id", default=None, help="Use the conditions of a saved view.")
@click.option("--page", type=int, default=None, help="Page number.")
@click.option("--page-size", type=int, default=None, help="Page size.")
@click.option("--sort", default=None, help="Sort expression, e.g. -createdAt,name.")
@click.pass_obj
def build(
    config: FieldForgeConfig,
    conditions_file: Path | None,
    view_id: str | None,
    page: int | None,
    page_size: int | None,
    sort: str | None,
):
    """Compile filter conditions into flat query parameters."""
    if (conditions_file is None) == (view_id is None):
        raise click.UsageError("Pass either CONDITIONS_FILE or --view")

    if view_id is not None:
        loader = ViewConfigLoader(config.metadata_path / "views")
        loader.load_all()
        view = loader.get_view(view_id)
        if view is None:
            click.echo(f"Error: Unknown view '{view_id}'", err=True)
            raise SystemExit(1)
        conditions = list(view.conditions)
    else:
        conditions = _conditions_from_file(conditions_file)

    echo_json(build_complete_query(conditions, page=page, page_size=page_size, sort=sort))


@filters.command("parse")
@click.argument("query_string")
@click.option(
    "--allow",
    "allowed",
    multiple=True,
    help="Field that may be filtered on (repeatable). Default: any.",
)
@click.pass_obj
def parse_cmd(config: FieldForgeConfig, query_string: str, allowed: tuple[str, ...]):
    """Parse a list-endpoint QUERY_STRING into filter, sort and paging."""
    params = {
        key: values[0] if len(values) == 1 else values
        for key, values in parse_qs(query_string.lstrip("?"), keep_blank_values=True).items()
    }
    parsed = parse_query(params, config.query_parsing(list(allowed)))
    echo_json(parsed.to_dict())


@filters.command()
@click.argument("filter_set")
@click.pass_obj
def operators(config: FieldForgeConfig, filter_set: str):
    """List the operators offered for each field of FILTER_SET."""
    loader = load_schemas(config)
    fields = loader.get_filter_set(filter_set)
    if fields is None:
        click.echo(f"Error: Unknown filter set '{filter_set}'", err=True)
        raise SystemExit(1)

    for field in fields:
        ops = ", ".join(op.value for op in available_operators(field))
        click.echo(f"  {field.key} ({field.type.value}): {ops}")
