"""
nowen CLI.

Operator commands for a nowen-note installation, built with Typer and
Rich.

Usage:
    nowen --help
    nowen db init            # Create tables and the search index
    nowen db seed            # Create the default account
    nowen db reindex         # Rebuild the search index
    nowen db upgrade         # Apply Alembic migrations
"""

import typer
from rich.console import Console

from nowen_note.backend.core.config import find_project_root
from nowen_note.backend.core.logging import setup_logging
from nowen_note.cli.commands import db_app

app = typer.Typer(
    name="nowen",
    help="nowen-note administration: database, search index and seeding.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

app.add_typer(db_app, name="db")


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output (INFO level logging)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug mode (DEBUG level logging)",
    ),
) -> None:
    """nowen-note administration CLI."""
    try:
        find_project_root()
    except RuntimeError:
        console.print("[red]Error: .project_root not found. Run from project root.[/red]")
        raise typer.Exit(1)

    if debug:
        setup_logging(level="DEBUG", format_type="console")
        console.print("[dim]Debug mode enabled[/dim]")
    elif verbose:
        setup_logging(level="INFO", format_type="console")
    else:
        setup_logging(level="WARNING", format_type="console")


if __name__ == "__main__":
    app()
