"""
API v1 schemas package.

Exports the envelope and health schemas used in the API. Domain payloads
(Task, User, AuthResult) live in taskmanager.models.
"""

from taskmanager.api.v1.schemas.common import ApiResponse, ErrorResponse
from taskmanager.api.v1.schemas.health import (
    DatabaseHealth,
    HealthReport,
    HealthServices,
    ServiceInfo,
    SystemInfo,
)

__all__ = [
    # Envelopes
    "ApiResponse",
    "ErrorResponse",
    # Health
    "DatabaseHealth",
    "HealthReport",
    "HealthServices",
    "ServiceInfo",
    "SystemInfo",
]
