"""CLI entry point for floe-partitions.

Validates partition field declarations against a table schema and prints
their canonical form.
"""

from __future__ import annotations

from pathlib import Path

import click
import rich_click as rclick
import yaml
from pyiceberg.schema import Schema

from floe_partitions import __version__
from floe_partitions.canonical import to_partition_fields
from floe_partitions.errors import PartitionSpecError
from floe_partitions.observability import configure_logging
from floe_partitions.output import error, info, print_json, set_no_color
from floe_partitions.partitions import build_partition_spec

# Configure rich-click for better help formatting
rclick.rich_click.TEXT_MARKUP = "markdown"
rclick.rich_click.SHOW_ARGUMENTS = True

# Exit codes following sysexits.h convention
EXIT_SUCCESS = 0
EXIT_USER_ERROR = 1  # Invalid declaration
EXIT_SYSTEM_ERROR = 2  # Missing or unreadable schema file


def load_schema(path: Path) -> Schema:
    """Load an Iceberg schema from a JSON or YAML file.

    The file holds an Iceberg schema document:
    ``{"type": "struct", "fields": [{"id": 1, "name": "id", "type": "long",
    "required": true}]}``.

    Args:
        path: Path to a ``.json``, ``.yaml`` or ``.yml`` file.

    Returns:
        Parsed Iceberg Schema.

    Raises:
        ValueError: If the document is not a valid schema.
        yaml.YAMLError: If a YAML file cannot be parsed.
    """
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        data = yaml.safe_load(text)
        if not isinstance(data, dict):
            msg = f"Expected a mapping at the top of {path}"
            raise ValueError(msg)
        return Schema.model_validate(data)
    return Schema.model_validate_json(text)


@click.group(cls=rclick.RichGroup)
@click.version_option(version=__version__, prog_name="floe-partitions")
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable colored output.",
    is_eager=True,
    expose_value=False,
    callback=lambda ctx, param, value: set_no_color(value) if value else None,
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Enable structured logging at this level.",
)
def cli(log_level: str | None) -> None:
    """Floe partitions - validate Iceberg partition field declarations.

    **Example:**

    - `floe-partitions validate --schema orders.json "day(ts)" "bucket(id, 16)"`
    """
    if log_level:
        configure_logging(log_level=log_level, json_format=False)


@cli.command()
@click.option(
    "-s",
    "--schema",
    "schema_path",
    type=click.Path(exists=False),
    required=True,
    help="Path to an Iceberg schema document (JSON or YAML).",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    help="Print the partition spec as JSON.",
)
@click.argument("declarations", nargs=-1, required=True)
def validate(schema_path: str, as_json: bool, declarations: tuple[str, ...]) -> None:
    """Validate partition field declarations and print their canonical form.

    Examples:

        floe-partitions validate -s orders.json order_key "YEAR(ts)"

        floe-partitions validate -s orders.yaml --json "bucket(order_key, 42)"
    """
    path = Path(schema_path)
    if not path.exists():
        error(f"Schema file not found: {schema_path}")
        raise SystemExit(EXIT_SYSTEM_ERROR)

    try:
        schema = load_schema(path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        error(f"Invalid schema file {schema_path}: {e}")
        raise SystemExit(EXIT_SYSTEM_ERROR) from None

    try:
        spec = build_partition_spec(schema, declarations)
    except PartitionSpecError as e:
        error(str(e))
        raise SystemExit(EXIT_USER_ERROR) from None

    canonical = to_partition_fields(schema, spec)
    if as_json:
        print_json(
            {
                "spec_id": spec.spec_id,
                "fields": [
                    {
                        "declaration": declaration,
                        "source_id": field.source_id,
                        "source_name": field.source_name,
                        "transform": str(field.transform),
                    }
                    for declaration, field in zip(canonical, spec.fields)
                ],
            }
        )
        return

    for declaration in canonical:
        info(declaration)


if __name__ == "__main__":
    cli()
