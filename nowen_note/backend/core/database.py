"""
Database Configuration.

SQLAlchemy async engine and session management for the embedded SQLite
store. Uses lazy initialization to prevent import-time failures when
configuration is not in place.

SQLite only enforces ON DELETE CASCADE when the foreign_keys pragma is on,
so every engine created here (and in tests) goes through
set_sqlite_pragmas.
"""

from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from nowen_note.backend.core.logging import get_logger

logger = get_logger(__name__)

FTS_TABLE_DDL = (
    "CREATE VIRTUAL TABLE IF NOT EXISTS notes_fts USING fts5("
    "note_id UNINDEXED, title, content_text)"
)

# Module-level state for lazy initialization
_engine: AsyncEngine | None = None
_async_session_factory: async_sessionmaker[AsyncSession] | None = None


def set_sqlite_pragmas(engine: AsyncEngine) -> None:
    """Turn on foreign keys and WAL journaling for every new SQLite connection."""

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection: Any, connection_record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()


def _create_engine() -> AsyncEngine:
    """Create async SQLAlchemy engine."""
    from nowen_note.backend.core.config import get_app_config, get_database_url

    db_config = get_app_config().database
    url = get_database_url()

    database = make_url(url).database
    if database and database != ":memory:":
        Path(database).parent.mkdir(parents=True, exist_ok=True)

    engine = create_async_engine(
        url,
        echo=db_config.echo,
        connect_args={"timeout": db_config.busy_timeout_seconds},
    )
    set_sqlite_pragmas(engine)
    logger.debug("Database engine created", extra={"database": database})
    return engine


def get_engine() -> AsyncEngine:
    """
    Get the database engine, creating it on first use.

    Raises:
        RuntimeError: If database configuration is invalid
    """
    global _engine
    if _engine is None:
        _engine = _create_engine()
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get the session factory, creating it on first use."""
    global _async_session_factory
    if _async_session_factory is None:
        _async_session_factory = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _async_session_factory


async def init_database(engine: AsyncEngine | None = None) -> None:
    """
    Create all tables and the full-text index if they do not exist yet.

    Safe to call on every startup.
    """
    from nowen_note.backend.models import Base

    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        await conn.execute(text(FTS_TABLE_DDL))
    logger.debug("Database schema ensured")


async def dispose_engine() -> None:
    """Dispose the engine and forget the cached factory."""
    global _engine, _async_session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _async_session_factory = None


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides a database session.

    The whole request runs in one transaction: committed when the handler
    returns, rolled back if it raises.

    Usage in endpoints:
        @router.get("/items")
        async def get_items(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    session_factory = get_session_factory()
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
