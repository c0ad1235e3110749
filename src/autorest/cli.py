"""CLI for autorest.

Usage:
    autorest serve
    autorest serve --database-url sqlite:///./addressbook.db --port 8080
    autorest tables --database-url postgresql+psycopg://localhost/addressbook

Environment:
    Loads .env file from current directory if present.
    Every option falls back to the matching AUTOREST_* variable.

Logging:
    -v / --verbose: Show INFO level logs
    -vv: Show DEBUG level logs
    --log-format json: Output logs as JSON (for cloud/production)
"""

from __future__ import annotations

import json
from typing import Annotated, Any

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table as RichTable

from autorest.core.config import Settings
from autorest.core.connections import ConnectionConfig, ConnectionManager
from autorest.core.errors import DatabaseError
from autorest.core.logging import configure_logging

# Load .env file from current directory
load_dotenv()

console = Console()

app = typer.Typer(
    name="autorest",
    help="Generic REST API over the tables of a relational database.",
    no_args_is_help=True,
)

DatabaseUrlOption = Annotated[
    str | None,
    typer.Option("--database-url", "-d", help="SQLAlchemy database URL"),
]

SchemaOption = Annotated[
    str | None,
    typer.Option("--schema", help="Schema whose tables are exposed"),
]

VerboseOption = Annotated[
    int,
    typer.Option(
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-v=INFO, -vv=DEBUG)",
    ),
]


def setup_logging(verbosity: int = 0, log_format: str = "console") -> str:
    """Configure structured logging based on verbosity level.

    Args:
        verbosity: 0=WARNING, 1=INFO, 2+=DEBUG
        log_format: "console" for development, "json" for production/cloud

    Returns:
        The selected log level name
    """
    if verbosity >= 2:
        level = "DEBUG"
    elif verbosity >= 1:
        level = "INFO"
    else:
        level = "WARNING"

    configure_logging(
        log_level=level,
        log_format=log_format,
        show_timestamps=verbosity >= 1,
        color=log_format == "console",
    )
    return level


def _settings(**overrides: Any) -> Settings:
    """Settings from the environment with CLI options applied on top."""
    return Settings(**{key: value for key, value in overrides.items() if value is not None})


@app.command()
def serve(
    database_url: DatabaseUrlOption = None,
    schema: SchemaOption = None,
    host: Annotated[str | None, typer.Option(help="Interface to bind")] = None,
    port: Annotated[int | None, typer.Option(help="Port to listen on")] = None,
    base_url: Annotated[
        str | None, typer.Option(help="Public base address for resource locations")
    ] = None,
    verbose: VerboseOption = 1,
    log_format: Annotated[
        str, typer.Option("--log-format", help="Log format: console or json")
    ] = "console",
) -> None:
    """Serve every table of the database as a REST resource."""
    from autorest.api.server import run_server

    level = setup_logging(verbose, log_format)
    settings = _settings(
        database_url=database_url,
        db_schema=schema,
        host=host,
        port=port,
        base_url=base_url,
        log_level=level,
        log_format=log_format,
    )
    run_server(settings)


@app.command()
def tables(
    database_url: DatabaseUrlOption = None,
    schema: SchemaOption = None,
    as_json: Annotated[bool, typer.Option("--json", help="Output as JSON for scripting")] = False,
    verbose: VerboseOption = 0,
) -> None:
    """List the tables and columns that would be exposed."""
    from autorest.schema.catalog import SchemaCatalog

    setup_logging(verbose)
    settings = _settings(database_url=database_url, db_schema=schema)

    manager = ConnectionManager(ConnectionConfig.from_settings(settings))
    manager.initialize()
    try:
        catalog = SchemaCatalog(manager, schema=settings.db_schema)
        listing = {name: catalog.list_columns(name) for name in catalog.list_tables()}
    except DatabaseError as e:
        console.print(f"[red]Database unavailable: {e.message}[/red]")
        raise typer.Exit(1) from e
    finally:
        manager.close()

    if as_json:
        console.print_json(json.dumps(listing))
        return

    table = RichTable(title="Resources")
    table.add_column("Table", style="cyan")
    table.add_column("Columns")
    for name, columns in listing.items():
        table.add_row(name, ", ".join(columns))
    console.print(table)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
