"""
EasyDB CLI Entry Point

Command-line interface for running statements against the configured
database and inspecting configuration.
"""

from pathlib import Path
from typing import Any, List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from easydb.config import get_settings, load_settings
from easydb.connection import ConnectionHandle
from easydb.exceptions import EasyDBError
from easydb.executor.query import QueryExecutor
from easydb.utils.logger import setup_logging

app = typer.Typer(
    name="easydb",
    help="EasyDB - MySQL query executor and table builder",
    add_completion=False,
)
console = Console()


def parse_param(raw: str) -> tuple[str, Any]:
    """
    Parse a ``name=value`` option.

    ``null`` becomes None, ``true``/``false`` become booleans and integer
    literals become ints; anything else stays a string.
    """
    if "=" not in raw:
        raise typer.BadParameter(f"Expected name=value, got '{raw}'")

    name, value = raw.split("=", 1)
    name = name.strip()
    lowered = value.lower()

    if lowered == "null":
        return name, None
    if lowered in ("true", "false"):
        return name, lowered == "true"
    try:
        return name, int(value)
    except ValueError:
        return name, value


@app.command("exec")
def exec_sql(
    sql: str = typer.Argument(..., help="SQL statement with :name placeholders"),
    param: Optional[List[str]] = typer.Option(
        None, "--param", "-p", help="Placeholder value as name=value (repeatable)"
    ),
    env_file: Optional[Path] = typer.Option(None, "--env", "-e", help="Path to .env file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
):
    """
    Execute a statement and show its result and log entry.
    """
    settings = load_settings(env_file) if env_file else get_settings()
    setup_logging(level="DEBUG" if verbose else settings.log_level, log_file=settings.log_file)

    params = dict(parse_param(p) for p in param or [])

    try:
        with ConnectionHandle.from_config(settings.database) as conn:
            executor = QueryExecutor(conn)
            result = executor.exec(sql, params)
            entry = executor.get_log(last_only=True)
    except EasyDBError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if isinstance(result, list):
        table = Table(title=f"{len(result)} row(s)")
        columns = list(result[0].keys()) if result else []
        for column in columns:
            table.add_column(escape(str(column)), style="cyan")
        for row in result:
            table.add_row(*("NULL" if row[c] is None else escape(str(row[c])) for c in columns))
        console.print(table)

    console.print(f"\n[bold]SQL:[/bold] {escape(entry.sql)}")
    console.print(f"Rows affected: {entry.rows_affected}")
    if entry.last_id is not None:
        console.print(f"Last id: {entry.last_id}")

    if result is False:
        console.print(f"[red]Failed: {escape(entry.error_message)}[/red]")
        raise typer.Exit(1)

    console.print("[green]OK[/green]")


@app.command()
def config(
    env_file: Optional[Path] = typer.Option(None, "--env", "-e", help="Path to .env file"),
):
    """
    Show current configuration.
    """
    settings = load_settings(env_file) if env_file else get_settings()

    console.print("\n[bold blue]EasyDB Configuration[/bold blue]")
    console.print("-" * 40)

    console.print("\n[cyan]Database:[/cyan]")
    if settings.db_name:
        console.print(f"  {settings.database.get_connection_string()}")
    else:
        console.print("  [yellow]No database configured[/yellow]")

    console.print("\n[cyan]Tables:[/cyan]")
    console.print(f"  Collation: {settings.default_collation}")
    console.print(f"  Engine: {settings.default_engine}")

    console.print("\n[cyan]Logging:[/cyan]")
    console.print(f"  Level: {settings.log_level}")
    console.print(f"  File: {settings.log_file or '-'}")


@app.command()
def version():
    """
    Show version information.
    """
    from easydb import __version__

    console.print(f"EasyDB version: [green]{__version__}[/green]")


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
