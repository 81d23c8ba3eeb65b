"""
FastAPI Application Entry Point.

This is the main entry point for the nowen-note backend.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nowen_note.backend.api import health
from nowen_note.backend.api.v1 import router as api_v1_router
from nowen_note.backend.core.config import get_app_config
from nowen_note.backend.core.database import dispose_engine, get_session_factory, init_database
from nowen_note.backend.core.exception_handlers import register_exception_handlers
from nowen_note.backend.core.logging import get_logger, log_with_source, setup_logging
from nowen_note.backend.core.middleware import (
    REQUEST_ID_HEADER,
    RESPONSE_TIME_HEADER,
    RequestContextMiddleware,
)
from nowen_note.backend.services.seed import SeedService

logger = get_logger(__name__)

_app: FastAPI | None = None


async def prepare_database() -> None:
    """Create missing tables and seed an empty database."""
    await init_database()
    async with get_session_factory()() as session:
        async with session.begin():
            seeded = await SeedService(session).seed_if_empty()
    if seeded:
        log_with_source(logger, "startup", "info", "Seeded empty database")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    app_config = get_app_config()
    setup_logging(level=app_config.logging.level)

    logger.info(
        "Application starting",
        extra={
            "app_name": app_config.application.name,
            "env": app_config.application.environment,
        },
    )
    await prepare_database()
    yield
    await dispose_engine()
    logger.info("Application shutting down")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app_config = get_app_config()
    app_settings = app_config.application

    app = FastAPI(
        title=app_settings.name,
        description=app_settings.description,
        version=app_settings.version,
        docs_url="/docs" if app_settings.debug else None,
        redoc_url="/redoc" if app_settings.debug else None,
        lifespan=lifespan,
    )

    app.add_middleware(RequestContextMiddleware)

    cors_origins = app_settings.cors.origins
    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=[REQUEST_ID_HEADER, RESPONSE_TIME_HEADER],
        )

    register_exception_handlers(app)

    app.include_router(health.router, tags=["health"])
    app.include_router(api_v1_router, prefix=app_settings.api_prefix)

    return app


def get_app() -> FastAPI:
    """
    Get the application instance (lazy initialization).

    This function creates the app on first call and caches it.
    Use this instead of importing `app` directly to avoid
    import-time configuration errors.
    """
    global _app
    if _app is None:
        _app = create_app()
    return _app


# For uvicorn: `uvicorn nowen_note.backend.main:app`
def __getattr__(name: str) -> FastAPI:
    """Support lazy access to `app` for uvicorn compatibility."""
    if name == "app":
        return get_app()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
