"""
Health and service information schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from taskmanager.models.base import CamelModel


class DatabaseHealth(CamelModel):
    """Result of the database probe."""

    healthy: bool = Field(..., description="Whether the probe succeeded")
    response_time_ms: Optional[float] = Field(
        default=None, description="Probe round trip in milliseconds"
    )
    connection_pool: Optional[dict[str, int]] = Field(
        default=None, description="Pool counters (size, checkedin, checkedout, overflow)"
    )
    tables: Optional[dict[str, int]] = Field(
        default=None, description="Row count per table"
    )
    error: Optional[str] = Field(default=None, description="Failure reason")
    timestamp: datetime = Field(..., description="When the probe ran")


class HealthServices(CamelModel):
    """Health of each backing service."""

    database: DatabaseHealth


class HealthReport(CamelModel):
    """Overall service health."""

    status: str = Field(..., description="healthy or unhealthy")
    timestamp: datetime = Field(..., description="Report time")
    version: str = Field(..., description="Application version")
    environment: str = Field(..., description="Deployment environment")
    uptime_seconds: float = Field(..., description="Seconds since startup")
    services: HealthServices


class SystemInfo(CamelModel):
    """Runtime information (development only)."""

    python_version: str
    implementation: str
    platform: str
    arch: str
    pid: int
    environment: str
    uptime_seconds: float
    max_rss_kb: Optional[int] = Field(
        default=None, description="Peak resident set size where the platform reports it"
    )
    timestamp: datetime


class ServiceInfo(CamelModel):
    """Root endpoint payload."""

    name: str
    version: str
    environment: str
    timestamp: datetime
    authenticated: bool = Field(..., description="Whether a valid token was presented")
