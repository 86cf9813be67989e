"""Command Line Interface for QueryGate."""

import csv
import io
import json
import logging
import sys
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .. import __version__
from ..config.settings import get_settings
from ..database.executor import QueryExecutor
from ..database.models import QueryRequest, QueryResult

# Initialize CLI app
app = typer.Typer(
    name="querygate",
    help="Run SQL against JT400 endpoints described on the command line, or serve the query API.",
    add_completion=False
)

# Rich console for beautiful output
console = Console()


def setup_logging(debug: bool = False) -> None:
    """Set up logging configuration."""
    level = logging.DEBUG if debug else getattr(logging, get_settings().log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)]
    )


def build_request(
    host: str,
    port: int,
    database: Optional[str],
    user: str,
    password: Optional[str],
    secure: bool,
    libraries: Optional[str],
    schema: Optional[str],
    sql: Optional[str] = None,
) -> QueryRequest:
    """Build a query request from command line options, prompting for a missing password."""
    if password is None:
        password = typer.prompt("Password", hide_input=True)
    return QueryRequest(
        host=host,
        port=port,
        database=database,
        username=user,
        password=password,
        secure=secure,
        library_list=libraries,
        default_schema=schema,
        sql=sql,
    )


def display_query_result(result: QueryResult, output_format: str = "table") -> None:
    """Display query results in the specified format."""
    if not result.success:
        console.print(f"[red]Query failed: {result.error}[/red]")
        if result.error_details:
            console.print(Panel(result.error_details.rstrip(), title="Details", border_style="red"))
        return

    if result.row_count == 0:
        console.print("[yellow]No results found.[/yellow]")
        return

    columns = list(result.rows[0].columns)

    if output_format.lower() == "json":
        console.print(json.dumps([row.to_dict() for row in result.rows], indent=2, default=str))

    elif output_format.lower() == "csv":
        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow(columns)
        writer.writerows(row.positional_values for row in result.rows)
        console.print(output.getvalue())

    else:  # table format (default)
        table = Table(show_header=True, header_style="bold magenta")

        for column in columns:
            table.add_column(column)

        # Add rows (limit to first 50 for display)
        for row in result.rows[:50]:
            table.add_row(*[str(val) if val is not None else "" for val in row.positional_values])

        console.print(table)

        if result.row_count > 50:
            console.print(f"[yellow]Showing first 50 of {result.row_count} results[/yellow]")

    console.print(f"[dim]Executed in {result.execution_time_ms} ms[/dim]")


HOST_OPTION = typer.Option(..., "--host", "-h", help="Endpoint host name or address")
PORT_OPTION = typer.Option(0, "--port", "-p", help="Endpoint port, 0 for the driver default")
DATABASE_OPTION = typer.Option(None, "--database", help="Database name")
USER_OPTION = typer.Option(..., "--user", "-u", help="User profile")
PASSWORD_OPTION = typer.Option(None, "--password", help="Password, prompted when omitted")
SECURE_OPTION = typer.Option(False, "--secure/--no-secure", help="Use a TLS connection")
LIBRARIES_OPTION = typer.Option(None, "--libraries", "-l", help="Library list")
SCHEMA_OPTION = typer.Option(None, "--schema", "-s", help="Default schema")


@app.command()
def query(
    sql: str = typer.Argument(..., help="SQL statement to execute"),
    host: str = HOST_OPTION,
    port: int = PORT_OPTION,
    database: Optional[str] = DATABASE_OPTION,
    user: str = USER_OPTION,
    password: Optional[str] = PASSWORD_OPTION,
    secure: bool = SECURE_OPTION,
    libraries: Optional[str] = LIBRARIES_OPTION,
    schema: Optional[str] = SCHEMA_OPTION,
    output_format: str = typer.Option("table", "--format", "-f", help="Output format: table, json, csv"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging")
) -> None:
    """Execute one SQL statement against the given endpoint."""
    setup_logging(debug)

    request = build_request(host, port, database, user, password, secure, libraries, schema, sql)
    executor = QueryExecutor(get_settings())

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True
    ) as progress:
        progress.add_task("Executing query...", total=None)
        result = executor.execute_query(request)

    display_query_result(result, output_format)

    if not result.success:
        raise typer.Exit(1)


@app.command()
def test_connection(
    host: str = HOST_OPTION,
    port: int = PORT_OPTION,
    database: Optional[str] = DATABASE_OPTION,
    user: str = USER_OPTION,
    password: Optional[str] = PASSWORD_OPTION,
    secure: bool = SECURE_OPTION,
    libraries: Optional[str] = LIBRARIES_OPTION,
    schema: Optional[str] = SCHEMA_OPTION,
) -> None:
    """Test connectivity to an endpoint."""
    setup_logging(False)

    spec = build_request(host, port, database, user, password, secure, libraries, schema)
    result = QueryExecutor(get_settings()).test_connection(spec)

    if result.success:
        console.print(f"[green]✓ Connected to {spec.host} in {result.execution_time_ms} ms[/green]")
    else:
        console.print(f"[red]✗ Connection failed: {result.error}[/red]")
        raise typer.Exit(1)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", help="Bind port"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging")
) -> None:
    """Serve the query API."""
    import uvicorn

    from ..api.app import create_app

    settings = get_settings()
    setup_logging(debug or settings.debug)

    console.print(f"[green]Starting query API on {host or settings.api_host}:{port or settings.api_port}[/green]")
    uvicorn.run(
        create_app(settings),
        host=host or settings.api_host,
        port=port or settings.api_port,
        log_level="debug" if debug else settings.log_level.lower(),
    )


@app.command()
def version() -> None:
    """Show version information."""
    console.print(Panel.fit(
        f"[bold blue]QueryGate[/bold blue]\n"
        f"Version: {__version__}\n"
        "Runs SQL against request-supplied JT400 endpoints",
        border_style="blue"
    ))


if __name__ == "__main__":
    app()
