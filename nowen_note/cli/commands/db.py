"""
Database Commands.

Schema creation, seeding and search index maintenance, plus the Alembic
migration commands.
"""

import asyncio
import subprocess
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from nowen_note.backend.core.config import find_project_root, get_database_url
from nowen_note.backend.core.database import dispose_engine, get_session_factory, init_database
from nowen_note.backend.core.logging import get_logger, log_with_source
from nowen_note.backend.services.search import SearchService
from nowen_note.backend.services.seed import SeedService

app = typer.Typer(help="Database commands")
console = Console()
logger = get_logger(__name__)

ALEMBIC_INI = ("nowen_note", "backend", "migrations", "alembic.ini")


def _alembic_ini() -> Path:
    path = find_project_root().joinpath(*ALEMBIC_INI)
    if not path.exists():
        console.print("[red]Error: nowen_note/backend/migrations/alembic.ini not found[/red]")
        raise typer.Exit(1)
    return path


def _run_alembic(args: list[str]) -> None:
    """Run an alembic command from the project root."""
    cmd = [sys.executable, "-m", "alembic", "-c", str(_alembic_ini())] + args
    result = subprocess.run(cmd, cwd=find_project_root())
    if result.returncode != 0:
        raise typer.Exit(result.returncode)


async def _init() -> None:
    try:
        await init_database()
    finally:
        await dispose_engine()


async def _reindex() -> int:
    try:
        async with get_session_factory()() as session:
            async with session.begin():
                return await SearchService(session).rebuild_index()
    finally:
        await dispose_engine()


async def _seed(demo: bool | None) -> bool:
    try:
        await init_database()
        async with get_session_factory()() as session:
            async with session.begin():
                return await SeedService(session).seed_if_empty(demo_content=demo)
    finally:
        await dispose_engine()


@app.command()
def init() -> None:
    """
    Create missing tables and the full-text index.

    Examples:
        nowen db init
    """
    console.print(f"[bold]Initializing database[/bold] {get_database_url()}")
    asyncio.run(_init())
    log_with_source(logger, "cli", "info", "Database initialized")
    console.print("[green]Database ready[/green]")


@app.command()
def reindex() -> None:
    """
    Rebuild the full-text search index from the notes table.

    Examples:
        nowen db reindex
    """
    console.print("[bold]Rebuilding search index[/bold]")
    count = asyncio.run(_reindex())
    log_with_source(logger, "cli", "info", "Search index rebuilt", count=count)

    table = Table(show_header=False)
    table.add_row("Notes indexed", str(count))
    console.print(table)


@app.command()
def seed(
    demo: bool | None = typer.Option(
        None,
        "--demo/--no-demo",
        help="Add demo notebooks and notes (defaults to features.yaml)",
    ),
) -> None:
    """
    Seed an empty database with the default account.

    Examples:
        nowen db seed
        nowen db seed --no-demo
    """
    seeded = asyncio.run(_seed(demo))
    if seeded:
        log_with_source(logger, "cli", "info", "Database seeded", demo=demo)
        console.print("[green]Database seeded[/green]")
    else:
        console.print("[yellow]Database already has an account, nothing seeded[/yellow]")


@app.command()
def upgrade(
    revision: str = typer.Option("head", "--revision", "-r", help="Target revision"),
) -> None:
    """
    Upgrade database to a revision.

    Examples:
        nowen db upgrade
        nowen db upgrade -r 0001
    """
    console.print(f"[bold]Upgrading database to revision: {revision}[/bold]\n")
    _run_alembic(["upgrade", revision])
    console.print("\n[green]Upgrade completed[/green]")


@app.command()
def current() -> None:
    """Show current database revision."""
    console.print("[bold]Current database revision:[/bold]\n")
    _run_alembic(["current"])


@app.command()
def history() -> None:
    """Show migration history."""
    console.print("[bold]Migration history:[/bold]\n")
    _run_alembic(["history", "--verbose"])
