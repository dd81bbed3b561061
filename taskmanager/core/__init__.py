"""
Core module: configuration, error taxonomy and shared infrastructure.
"""

from taskmanager.core.config import (
    AuthConfig,
    CompressionConfig,
    DatabaseConfig,
    Environment,
    MetricsConfig,
    RateLimitConfig,
    Settings,
    get_settings,
    parse_duration,
)
from taskmanager.core.errors import (
    AppError,
    ConflictError,
    ErrorCode,
    ForbiddenError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
    RateLimitError,
    ServiceUnavailableError,
    TokenExpiredError,
    UnauthorizedError,
    ValidationError,
)

__all__ = [
    # Config
    "AuthConfig",
    "CompressionConfig",
    "DatabaseConfig",
    "Environment",
    "MetricsConfig",
    "RateLimitConfig",
    "Settings",
    "get_settings",
    "parse_duration",
    # Errors
    "AppError",
    "ConflictError",
    "ErrorCode",
    "ForbiddenError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "NotFoundError",
    "RateLimitError",
    "ServiceUnavailableError",
    "TokenExpiredError",
    "UnauthorizedError",
    "ValidationError",
]
