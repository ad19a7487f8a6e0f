"""
Health check endpoints.
"""

import time

from fastapi import APIRouter

from src.application.dto.responses import (
    DatabaseHealthResponse,
    HealthResponse,
    ProviderHealthResponse,
)
from src.config import get_settings

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check.

    Returns service status, uptime and SQLite reachability.
    """
    from src.infrastructure.storage.sqlite import get_pool

    db_status = ProviderHealthResponse(name="sqlite", available=False)

    try:
        pool = await get_pool()
        start = time.time()
        async with pool.acquire() as conn:
            await conn.execute("SELECT 1")
        db_status = ProviderHealthResponse(
            name="sqlite",
            available=True,
            latency_ms=(time.time() - start) * 1000,
        )

    except Exception as e:
        db_status.error = str(e)

    return HealthResponse(
        status="healthy" if db_status.available else "unhealthy",
        version=get_settings().app_version,
        uptime_seconds=time.time() - _start_time,
        database=db_status,
    )


@router.get("/db", response_model=DatabaseHealthResponse)
async def db_health() -> DatabaseHealthResponse:
    """
    Database schema health.

    Reports the applied migration version, pending migrations and
    integrity check results.
    """
    from src.infrastructure.storage.sqlite.migrations import (
        get_migration_status,
        verify_schema_integrity,
    )

    migration_status = await get_migration_status()
    if not migration_status["exists"]:
        return DatabaseHealthResponse(status="missing")

    checks = await verify_schema_integrity()
    healthy = (
        all(c["status"] == "PASS" for c in checks)
        and not migration_status["pending_migrations"]
    )

    return DatabaseHealthResponse(
        status="healthy" if healthy else "unhealthy",
        current_version=migration_status["current_version"],
        pending_migrations=migration_status["pending_migrations"],
        checks=checks,
    )
