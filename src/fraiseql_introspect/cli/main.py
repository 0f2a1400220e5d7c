"""CLI commands for fraiseql-introspect."""

import logging
import sys
from pathlib import Path

import click
import psycopg

from fraiseql_introspect.config import CONFIG_FILENAME, Config
from fraiseql_introspect.exceptions import FraiseQLIntrospectError
from fraiseql_introspect.models import tables_to_json
from fraiseql_introspect.type_mapping import translate_column_type


def _load_config(config_path: str | None) -> Config:
    if config_path is not None:
        return Config.from_toml(config_path)
    try:
        return Config.find_and_load()
    except FileNotFoundError:
        return Config()


@click.group()
@click.version_option(package_name="fraiseql-introspect")
@click.option("--verbose", "-v", is_flag=True, help="Log catalog queries")
def cli(verbose: bool) -> None:
    """fraiseql-introspect - PostgreSQL schema model for code generators."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("names", nargs=-1)
@click.option("--url", help="PostgreSQL connection URL (overrides config)")
@click.option("--schema", help="Schema to introspect (overrides config)")
@click.option("--exclude", multiple=True, help="Extra table pattern to skip (repeatable)")
@click.option("--config", "config_path", type=click.Path(exists=True), help="Config file")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def tables(
    names: tuple[str, ...],
    url: str | None,
    schema: str | None,
    exclude: tuple[str, ...],
    config_path: str | None,
    output_json: bool,
) -> None:
    """Introspect tables (all tables when NAMES is empty)."""
    try:
        config = _load_config(config_path)
    except ValueError as e:
        # Covers TOML syntax errors and pydantic validation errors
        click.echo(f"Error: invalid configuration: {e}", err=True)
        sys.exit(1)

    if url:
        config.database.url = url
    if schema:
        config.database.schema_name = schema
    config.introspection.exclude_tables.extend(exclude)

    try:
        with psycopg.connect(config.database.url) as conn:
            introspector = config.create_introspector(conn)
            result = introspector.get_tables(*names)
    except psycopg.OperationalError as e:
        click.echo(f"Error: could not connect: {e}", err=True)
        sys.exit(1)
    except FraiseQLIntrospectError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if output_json:
        click.echo(tables_to_json(result, indent=config.output.indent))
        return

    for table in result:
        pk = ", ".join(table.primary_key_columns) or "-"
        click.echo(f"{table.name} (pk: {pk})")
        for col in table.columns:
            click.echo(f"  {col.name}: {col.type.value}")
        for fk in table.foreign_keys:
            click.echo(f"  {fk.column} -> {fk.foreign_table}.{fk.foreign_column}")


@cli.command()
@click.argument("native_type")
@click.option("--nullable", is_flag=True, help="Treat column as nullable")
def types(native_type: str, nullable: bool) -> None:
    """Show the portable tag for a native PostgreSQL type."""
    click.echo(translate_column_type(native_type, nullable).value)


@cli.command()
@click.option("--path", default=CONFIG_FILENAME, help="Config file to create")
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def init(path: str, force: bool) -> None:
    """Write a default configuration file."""
    config_path = Path(path)
    if config_path.exists() and not force:
        click.echo(f"Error: {config_path} already exists (use --force)", err=True)
        sys.exit(1)

    Config().to_toml(config_path)
    click.echo(f"✓ Created {config_path}")


if __name__ == "__main__":
    cli()
