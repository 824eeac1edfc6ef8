"""
Command-line interface for schema_discovery.

Lists catalogs, schemas and tables and describes single tables of a
configured database.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from schema_discovery import __version__
from schema_discovery.config import load_config
from schema_discovery.discoverer import SchemaDiscoverer
from schema_discovery.exceptions import DiscoveryError

console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Configure logging with Rich handler."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def _discoverer(ctx: click.Context) -> SchemaDiscoverer:
    try:
        config = load_config(ctx.obj["config"])
    except DiscoveryError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)
    return SchemaDiscoverer.from_config(config, logger=logging.getLogger("schema_discovery"))


def _print_names(title: str, names) -> None:
    table = Table(title=title)
    table.add_column("Name", style="cyan")
    for name in names:
        table.add_row(str(name))
    console.print(table)
    console.print(f"{len(names)} found")


@click.group()
@click.version_option(version=__version__, prog_name="schema-discovery")
@click.option(
    "-c",
    "--config",
    type=click.Path(path_type=Path),
    envvar="SCHEMA_DISCOVERY_CONFIG",
    required=True,
    help="YAML file with connection settings",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(ctx: click.Context, config: Path, verbose: bool) -> None:
    """
    Schema Discovery - relational database metadata browser
    """
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@cli.command()
@click.pass_context
def catalogs(ctx: click.Context) -> None:
    """List catalogs."""
    discoverer = _discoverer(ctx)
    try:
        names = discoverer.list_catalogs()
    except DiscoveryError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)
    _print_names("Catalogs", names)


@cli.command()
@click.pass_context
def schemas(ctx: click.Context) -> None:
    """List schemas."""
    discoverer = _discoverer(ctx)
    try:
        names = discoverer.list_schemas()
    except DiscoveryError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)
    _print_names("Schemas", names)


@cli.command()
@click.option("--schema", type=str, default=None, help="Schema name pattern")
@click.option("--table", "table_name", type=str, default=None, help="Table name pattern")
@click.pass_context
def tables(ctx: click.Context, schema: Optional[str], table_name: Optional[str]) -> None:
    """
    List tables as <schema>.<table>.

    Examples:

        schema-discovery -c db.yaml tables --schema SALES

        schema-discovery -c db.yaml tables --table "ORD%"
    """
    discoverer = _discoverer(ctx)
    try:
        names = discoverer.list_tables(schema, table_name)
    except DiscoveryError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)
    _print_names("Tables", names)


@cli.command()
@click.argument("table")
@click.option("--schema", type=str, default=None, help="Schema or catalog name")
@click.option(
    "--output",
    type=click.Path(path_type=Path),
    default=None,
    help="Write the table description to a YAML file",
)
@click.pass_context
def describe(ctx: click.Context, table: str, schema: Optional[str], output: Optional[Path]) -> None:
    """
    Describe the columns of a table.

    Example:

        schema-discovery -c db.yaml describe ORDERS --schema SALES
    """
    discoverer = _discoverer(ctx)
    try:
        table_schema = discoverer.describe_table(schema, table)
    except DiscoveryError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    if table_schema is None:
        console.print(f"[yellow]Table not found: {table}[/yellow]")
        sys.exit(2)

    fields_table = Table(title=table_schema.full_name)
    fields_table.add_column("Column", style="cyan")
    fields_table.add_column("Native Type", style="green")
    fields_table.add_column("Logical Type", style="green")
    fields_table.add_column("Nullable", style="yellow")
    fields_table.add_column("PK", style="magenta")
    fields_table.add_column("Description")

    for field in table_schema.fields:
        fields_table.add_row(
            field.name,
            field.native_type_name,
            field.logical_type.value,
            "yes" if field.nullable else "no",
            "yes" if field.is_primary_key else "",
            field.description or "",
        )

    console.print(fields_table)

    if output:
        with open(output, "w") as f:
            yaml.safe_dump(table_schema.to_dict(), f, default_flow_style=False, sort_keys=False)
        console.print(f"\n[green]Saved table description to: {output}[/green]")


if __name__ == "__main__":
    cli()
