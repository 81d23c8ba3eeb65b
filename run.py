#!/usr/bin/env python3
"""
Application Entry Script.

Main entry point for the nowen-note backend. All functionality is
accessible through command-line options.

Usage:
    python run.py --help
    python run.py --action server --verbose
    python run.py --action health --debug
    python run.py --action config
    python run.py --action test --test-type unit
"""

import sqlite3
import subprocess
import sys
from pathlib import Path

import click

# Ensure project root is in path for absolute imports
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from nowen_note.backend.core.logging import get_logger, setup_logging


def validate_project_root() -> Path:
    """Validate that we're running from the project root."""
    if not (PROJECT_ROOT / ".project_root").exists():
        click.echo(
            click.style("Error: .project_root not found. Run from project root.", fg="red"),
            err=True,
        )
        sys.exit(1)
    return PROJECT_ROOT


@click.command()
@click.option(
    "--action",
    type=click.Choice(["server", "health", "config", "test", "info"]),
    default="info",
    help="Action to perform.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output (INFO level logging).")
@click.option("--debug", "-d", is_flag=True, help="Enable debug output (DEBUG level logging).")
@click.option("--host", default=None, help="Server host (for server action).")
@click.option("--port", default=None, type=int, help="Server port (for server action).")
@click.option("--reload", is_flag=True, help="Enable auto-reload (for server action).")
@click.option(
    "--test-type",
    type=click.Choice(["all", "unit", "integration"]),
    default="all",
    help="Test type to run (for test action).",
)
def main(
    action: str,
    verbose: bool,
    debug: bool,
    host: str | None,
    port: int | None,
    reload: bool,
    test_type: str,
) -> None:
    """
    nowen-note Entry Point.

    Run the API server, check health, view configuration, or run tests.

    Examples:

        # Start development server
        python run.py --action server --reload --verbose

        # View loaded configuration
        python run.py --action config

        # Run unit tests
        python run.py --action test --test-type unit
    """
    validate_project_root()

    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = "WARNING"

    setup_logging(level=log_level, format_type="console")
    logger = get_logger(__name__)

    logger.debug("Starting application", extra={"action": action, "log_level": log_level})

    if action == "server":
        run_server(logger, host, port, reload)
    elif action == "health":
        check_health(logger)
    elif action == "config":
        show_config(logger)
    elif action == "test":
        run_tests(logger, test_type)
    elif action == "info":
        show_info(logger)


def run_server(logger, host: str | None, port: int | None, reload: bool) -> None:
    """Start the FastAPI server with uvicorn."""
    from nowen_note.backend.core.config import get_app_config

    server = get_app_config().application.server
    server_host = host or server.host
    server_port = port or server.port

    logger.info(
        "Starting server",
        extra={"host": server_host, "port": server_port, "reload": reload},
    )

    cmd = [
        sys.executable, "-m", "uvicorn",
        "nowen_note.backend.main:app",
        "--host", server_host,
        "--port", str(server_port),
    ]
    if reload:
        cmd.append("--reload")

    click.echo(f"Starting server at http://{server_host}:{server_port}")
    click.echo("Press Ctrl+C to stop\n")

    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except subprocess.CalledProcessError as e:
        logger.error("Server failed to start", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


def check_health(logger) -> None:
    """Check that configuration, secrets and the app itself load."""
    click.echo("Checking application health...\n")

    checks = []

    try:
        from nowen_note.backend.core.config import get_app_config

        app_config = get_app_config()
        checks.append(("YAML configuration", True, f"App: {app_config.application.name}"))
    except (ValueError, FileNotFoundError, RuntimeError) as e:
        checks.append(("YAML configuration", False, str(e)))
        logger.error("Configuration failed", extra={"error": str(e)})

    try:
        from pydantic import ValidationError

        from nowen_note.backend.core.config import get_settings

        get_settings()
        checks.append(("Secrets (config/.env)", True, None))
    except ValidationError as e:
        checks.append(("Secrets (config/.env)", False, "JWT_SECRET is not set"))
        logger.warning("Secrets not configured", extra={"error": str(e)})

    try:
        from nowen_note.backend.core.config import get_database_url

        checks.append(("Database URL", True, get_database_url()))
    except (ValueError, RuntimeError) as e:
        checks.append(("Database URL", False, str(e)))

    # Search depends on the FTS5 extension being compiled into SQLite
    fts_check = sqlite3.connect(":memory:")
    try:
        fts_check.execute("CREATE VIRTUAL TABLE fts_check USING fts5(body)")
        checks.append(("SQLite FTS5", True, f"SQLite {sqlite3.sqlite_version}"))
    except sqlite3.OperationalError as e:
        checks.append(("SQLite FTS5", False, str(e)))
        logger.error("FTS5 unavailable", extra={"error": str(e)})
    finally:
        fts_check.close()

    try:
        from nowen_note.backend.main import create_app

        app = create_app()
        checks.append(("FastAPI application", True, f"Routes: {len(app.routes)}"))
    except (ImportError, ValueError, RuntimeError) as e:
        checks.append(("FastAPI application", False, str(e)))
        logger.error("FastAPI app failed", extra={"error": str(e)})

    click.echo("Health Check Results:")
    click.echo("-" * 50)

    all_passed = True
    for name, passed, detail in checks:
        status = click.style("✓ PASS", fg="green") if passed else click.style("✗ FAIL", fg="red")
        detail_str = f" ({detail})" if detail else ""
        click.echo(f"  {status}  {name}{detail_str}")
        if not passed:
            all_passed = False

    click.echo("-" * 50)
    if all_passed:
        click.echo(click.style("\nAll checks passed!", fg="green"))
    else:
        click.echo(click.style("\nSome checks failed. See details above.", fg="yellow"))
        sys.exit(1)


def _echo_section(title: str, values: dict, indent: int = 2) -> None:
    if title:
        click.echo(f"\n{title}:")
        click.echo("-" * 40)
    for key, value in values.items():
        if isinstance(value, dict):
            click.echo(f"{' ' * indent}{key}:")
            _echo_section("", value, indent + 2)
        else:
            click.echo(f"{' ' * indent}{key}: {value}")


def show_config(logger) -> None:
    """Display loaded configuration. Secrets are never printed."""
    click.echo("Application Configuration:")

    from nowen_note.backend.core.config import get_app_config

    try:
        app_config = get_app_config()
    except (ValueError, FileNotFoundError) as e:
        logger.error("Failed to load configuration", extra={"error": str(e)})
        click.echo(click.style(f"Error loading configuration: {e}", fg="red"))
        sys.exit(1)

    _echo_section("Application (application.yaml)", app_config.application.model_dump())
    _echo_section("Database (database.yaml)", app_config.database.model_dump())
    _echo_section("Logging (logging.yaml)", app_config.logging.model_dump())
    _echo_section("Features (features.yaml)", app_config.features.model_dump())
    _echo_section(
        "Security (security.yaml)",
        app_config.security.model_dump(exclude={"auth": {"default_password"}}),
    )
    logger.info("Configuration displayed successfully")


def run_tests(logger, test_type: str) -> None:
    """Run the test suite."""
    logger.info("Running tests", extra={"type": test_type})

    cmd = [sys.executable, "-m", "pytest"]
    if test_type == "unit":
        cmd.append("tests/unit")
    elif test_type == "integration":
        cmd.append("tests/integration")
    else:
        cmd.append("tests/")
    cmd.append("-v")

    click.echo(f"Running: {' '.join(cmd)}\n")
    result = subprocess.run(cmd)
    sys.exit(result.returncode)


def show_info(logger) -> None:
    """Display application information."""
    from nowen_note.backend.core.config import get_app_config

    app_settings = get_app_config().application
    click.echo(app_settings.name)
    click.echo("=" * 40)
    click.echo(f"Version: {app_settings.version}")
    click.echo(f"Description: {app_settings.description}")
    click.echo()
    click.echo("Available Actions:")
    click.echo("  --action server   Start the API server")
    click.echo("  --action health   Check configuration and app wiring")
    click.echo("  --action config   Display configuration")
    click.echo("  --action test     Run test suite")
    click.echo("  --action info     Show this information")
    click.echo()
    click.echo("Database administration lives in the `nowen` CLI:")
    click.echo("  nowen db init | seed | reindex | upgrade | current | history")

    logger.debug("Info displayed")


if __name__ == "__main__":
    main()
