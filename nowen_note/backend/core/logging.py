"""
Logging setup for nowen-note.

Every module logs through get_logger(__name__). Settings come from the
validated logging.yaml (see LoggingSchema); keyword arguments to
setup_logging override them, which is how the CLIs pick their verbosity.

JSON records carry timestamp, level, logger, event, func_name and lineno,
plus whatever the request middleware bound to the context (request_id,
method, path) and the caller's extra fields. Work that runs outside a
request (CLI commands, startup seeding) tags its records with an explicit
source through log_with_source.

The file handler writes one JSON object per line to the configured path,
rotating by size.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Any

import structlog
from structlog.typing import Processor

from nowen_note.backend.core.config import find_project_root, get_app_config
from nowen_note.backend.core.config_schema import FileHandlerSchema

# Origins of work that runs outside an HTTP request
VALID_SOURCES = frozenset({"cli", "startup"})

# Third-party loggers that drown out application records at INFO
NOISY_LOGGERS = ("uvicorn.access", "aiosqlite", "alembic.runtime.migration")


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
    ]


def _file_handler(file_config: FileHandlerSchema, formatter: logging.Formatter) -> logging.Handler:
    log_path = find_project_root() / file_config.path
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=str(log_path),
        maxBytes=file_config.max_bytes,
        backupCount=file_config.backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    enable_console: bool | None = None,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        format_type: 'json' or 'console'
        enable_console: Write records to stdout
        enable_file_logging: Write records to the rotating JSONL file

    Any argument left as None takes its value from logging.yaml.
    """
    app_config = get_app_config()
    config = app_config.logging

    level_name = (level or config.level).upper()
    renderer_name = format_type or config.format
    console_on = config.handlers.console.enabled if enable_console is None else enable_console
    file_on = config.handlers.file.enabled if enable_file_logging is None else enable_file_logging

    processors = _shared_processors()
    structlog.configure(
        processors=processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    json_formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(ensure_ascii=False),
        foreign_pre_chain=processors,
    )
    if renderer_name == "console":
        stdout_formatter = structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()),
            foreign_pre_chain=processors,
        )
    else:
        stdout_formatter = json_formatter

    root = logging.getLogger()
    root.setLevel(getattr(logging, level_name))
    root.handlers.clear()

    if console_on:
        stdout_handler = logging.StreamHandler(sys.stdout)
        stdout_handler.setFormatter(stdout_formatter)
        root.addHandler(stdout_handler)
    if file_on:
        root.addHandler(_file_handler(config.handlers.file, json_formatter))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    # database.yaml echo turns SQL statement logging back on
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if app_config.database.echo else logging.WARNING
    )


def get_logger(name: str) -> Any:
    """Return a structlog logger bound to the given module name."""
    return structlog.get_logger(name)


def log_with_source(logger: Any, source: str, level: str, message: str, **kwargs: Any) -> None:
    """
    Log a message tagged with an explicit source.

    Example:
        log_with_source(logger, "cli", "info", "Index rebuilt", count=12)

    Raises:
        ValueError: If source is not one of VALID_SOURCES
    """
    if source not in VALID_SOURCES:
        raise ValueError(f"Unknown log source: {source}")
    getattr(logger, level.lower())(message, source=source, **kwargs)
