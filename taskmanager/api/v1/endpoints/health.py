"""
Health Endpoints.

Mounted at the application root (not under /api/v1) so probes keep a stable
path across API versions.
"""

import os
import platform
import sys
from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from taskmanager.api.v1.schemas.common import ApiResponse
from taskmanager.api.v1.schemas.health import (
    DatabaseHealth,
    HealthReport,
    HealthServices,
    SystemInfo,
)
from taskmanager.core.config import Settings
from taskmanager.core.container import Container, get_container_dep, get_settings_dep
from taskmanager.core.errors import ForbiddenError
from taskmanager.models.base import utcnow
from taskmanager.storage.database import check_database_health

router = APIRouter(prefix="/health", tags=["Health"])


async def _probe_database(container: Container) -> DatabaseHealth:
    result = await check_database_health(container.get_engine())
    return DatabaseHealth(timestamp=utcnow(), **result)


def _max_rss_kb() -> Optional[int]:
    try:
        import resource
    except ImportError:
        return None
    return int(resource.getrusage(resource.RUSAGE_SELF).ru_maxrss)


@router.get(
    "",
    response_model=ApiResponse[HealthReport],
    response_model_exclude_none=True,
    summary="Health Check",
    description="Service health including a database probe. Returns 503 when unhealthy.",
)
async def health_check(
    response: Response,
    container: Container = Depends(get_container_dep),
) -> ApiResponse[HealthReport]:
    """Health check endpoint for readiness probes."""
    settings = container.settings
    database = await _probe_database(container)
    healthy = database.healthy
    if not healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    report = HealthReport(
        status="healthy" if healthy else "unhealthy",
        timestamp=utcnow(),
        version=settings.app_version,
        environment=settings.environment.value,
        uptime_seconds=round(container.uptime_seconds, 3),
        services=HealthServices(database=database),
    )
    return ApiResponse(success=healthy, data=report)


@router.get(
    "/db",
    response_model=ApiResponse[DatabaseHealth],
    response_model_exclude_none=True,
    summary="Database Health",
)
async def database_health(
    response: Response,
    container: Container = Depends(get_container_dep),
) -> ApiResponse[DatabaseHealth]:
    """Database probe with pool counters and table row counts."""
    database = await _probe_database(container)
    if not database.healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return ApiResponse(success=database.healthy, data=database)


@router.get(
    "/system",
    response_model=ApiResponse[SystemInfo],
    response_model_exclude_none=True,
    summary="System Information",
    description="Runtime details. Not available in production.",
)
async def system_info(
    settings: Settings = Depends(get_settings_dep),
    container: Container = Depends(get_container_dep),
) -> ApiResponse[SystemInfo]:
    """Runtime information for local debugging."""
    if settings.is_production:
        raise ForbiddenError("System info not available in production")

    info = SystemInfo(
        python_version=platform.python_version(),
        implementation=sys.implementation.name,
        platform=sys.platform,
        arch=platform.machine(),
        pid=os.getpid(),
        environment=settings.environment.value,
        uptime_seconds=round(container.uptime_seconds, 3),
        max_rss_kb=_max_rss_kb(),
        timestamp=utcnow(),
    )
    return ApiResponse(data=info)
