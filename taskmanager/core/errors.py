"""
Application error taxonomy.

Every failure the API reports to clients is an AppError subclass carrying an
HTTP status and a stable error code. The codes are a public contract for
frontend code and must not change between releases.
"""

from typing import Optional


class ErrorCode:
    """Stable error code strings returned in the ``error`` field."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    INVALID_TOKEN = "INVALID_TOKEN"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    DUPLICATE_RESOURCE = "DUPLICATE_RESOURCE"
    NOT_FOUND = "NOT_FOUND"
    INVALID_REFERENCE = "INVALID_REFERENCE"
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    FORBIDDEN = "FORBIDDEN"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 500
    error_code: str = ErrorCode.INTERNAL_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, *, error_code: Optional[str] = None):
        self.message = message or self.default_message
        if error_code is not None:
            self.error_code = error_code
        super().__init__(self.message)


class ValidationError(AppError):
    """Raised when input is missing or malformed."""

    status_code = 400
    error_code = ErrorCode.VALIDATION_ERROR
    default_message = "Validation error"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        field: Optional[str] = None,
        error_code: Optional[str] = None,
    ):
        self.field = field
        super().__init__(message, error_code=error_code)


class UnauthorizedError(AppError):
    """Raised when a request lacks a usable identity."""

    status_code = 401
    error_code = ErrorCode.UNAUTHORIZED
    default_message = "Access token required"


class TokenExpiredError(UnauthorizedError):
    """Raised when a bearer token is past its expiry."""

    error_code = ErrorCode.TOKEN_EXPIRED
    default_message = "Token expired"


class InvalidTokenError(UnauthorizedError):
    """Raised when a bearer token is malformed or its signature does not match."""

    error_code = ErrorCode.INVALID_TOKEN
    default_message = "Invalid token"


class InvalidCredentialsError(UnauthorizedError):
    """
    Raised when login fails.

    Deliberately identical for unknown emails and wrong passwords.
    """

    error_code = ErrorCode.INVALID_CREDENTIALS
    default_message = "Invalid email or password"


class ForbiddenError(AppError):
    """Raised when an endpoint is disabled for the current environment."""

    status_code = 403
    error_code = ErrorCode.FORBIDDEN
    default_message = "Forbidden"


class NotFoundError(AppError):
    """Raised when a resource does not exist or is not owned by the caller."""

    status_code = 404
    error_code = ErrorCode.NOT_FOUND
    default_message = "Resource not found"


class ConflictError(AppError):
    """Raised when a unique field is already taken."""

    status_code = 409
    error_code = ErrorCode.DUPLICATE_RESOURCE
    default_message = "Resource already exists"


class RateLimitError(AppError):
    """Raised when a client exceeds its request allowance for the current window."""

    status_code = 429
    error_code = ErrorCode.RATE_LIMIT_EXCEEDED
    default_message = "Too many requests from this IP, please try again later."


class ServiceUnavailableError(AppError):
    """Raised when the backing store cannot be reached. Safe to retry."""

    status_code = 503
    error_code = ErrorCode.SERVICE_UNAVAILABLE
    default_message = "Service temporarily unavailable"
    retry_after_seconds = 5
