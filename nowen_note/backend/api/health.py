"""
Health Check Endpoints.

Endpoints:
- /health: Liveness check (process running)
- /health/ready: Readiness check (SQLite store reachable)
"""

from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from nowen_note.backend.core.dependencies import DbSession
from nowen_note.backend.core.logging import get_logger
from nowen_note.backend.core.utils import utc_now

router = APIRouter()
logger = get_logger(__name__)


@router.get("/health")
async def health_check() -> dict[str, str]:
    """
    Liveness check.

    Returns 200 if the process is running. No dependency checks.
    """
    return {"status": "healthy"}


@router.get("/health/ready", response_model=None)
async def readiness_check(db: DbSession) -> dict[str, Any] | JSONResponse:
    """
    Readiness check.

    Runs SELECT 1 against the store. Returns 503 when it fails.
    """
    start = utc_now()
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning("Database health check failed", extra={"error": str(e)})
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "checks": {"database": {"status": "unhealthy", "error": str(e)}},
                "timestamp": utc_now().isoformat(),
            },
        )

    latency_ms = int((utc_now() - start).total_seconds() * 1000)
    return {
        "status": "healthy",
        "checks": {"database": {"status": "healthy", "latency_ms": latency_ms}},
        "timestamp": utc_now().isoformat(),
    }
