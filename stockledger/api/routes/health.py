"""
Health check endpoints.
"""

import time

from fastapi import APIRouter

from stockledger.application.dto.responses import HealthResponse
from stockledger.config import get_logger, get_settings

logger = get_logger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check.

    Returns service status and uptime.
    """
    settings = get_settings()
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        uptime_seconds=time.time() - _start_time,
        storage=settings.storage.backend,
    )


@router.get("/db", response_model=HealthResponse)
async def db_health() -> HealthResponse:
    """
    Storage health check.

    Runs a trivial query against SQLite; the memory backend is always up.
    """
    settings = get_settings()
    error = None

    if settings.storage.backend == "sqlite":
        from stockledger.infrastructure.storage.sqlite import get_pool

        try:
            pool = await get_pool()
            async with pool.acquire() as conn:
                await conn.execute("SELECT 1")
        except Exception as e:
            logger.warning("db_health_failed", error=str(e))
            error = str(e)

    return HealthResponse(
        status="healthy" if error is None else "unhealthy",
        version=settings.app_version,
        uptime_seconds=time.time() - _start_time,
        storage=settings.storage.backend,
        error=error,
    )
