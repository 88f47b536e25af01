"""
Health check endpoints.
"""

import time

import aiosqlite
from fastapi import APIRouter, Depends

from pharmastock.api.dependencies import get_app_settings
from pharmastock.application.dto.responses import HealthResponse
from pharmastock.config import Settings, get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_app_settings)) -> HealthResponse:
    """
    Service and database health.

    Runs a trivial query through the connection pool.
    """
    from pharmastock.infrastructure.storage.sqlite import get_connection

    database = "ok"
    try:
        async with get_connection() as conn:
            await conn.execute("SELECT 1")
    except (aiosqlite.Error, OSError) as e:
        logger.warning("health_database_unavailable", error=str(e))
        database = "error"

    return HealthResponse(
        status="healthy" if database == "ok" else "degraded",
        version=settings.app_version,
        uptime_seconds=time.time() - _start_time,
        database=database,
    )
