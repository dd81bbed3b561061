"""
Exception handlers translating errors into the response envelope.

Every error response carries ``success: false``, a client-safe ``message``,
a stable ``error`` code and the request's path, method and timestamp.
"""

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskmanager.api.v1.schemas.common import ErrorResponse
from taskmanager.core.errors import AppError, ErrorCode, ServiceUnavailableError
from taskmanager.models.base import describe_first_error, utcnow

logger = logging.getLogger(__name__)

_HTTP_ERROR_CODES = {
    status.HTTP_400_BAD_REQUEST: ErrorCode.VALIDATION_ERROR,
    status.HTTP_401_UNAUTHORIZED: ErrorCode.UNAUTHORIZED,
    status.HTTP_403_FORBIDDEN: ErrorCode.FORBIDDEN,
    status.HTTP_404_NOT_FOUND: ErrorCode.NOT_FOUND,
    status.HTTP_405_METHOD_NOT_ALLOWED: ErrorCode.METHOD_NOT_ALLOWED,
    status.HTTP_429_TOO_MANY_REQUESTS: ErrorCode.RATE_LIMIT_EXCEEDED,
    status.HTTP_503_SERVICE_UNAVAILABLE: ErrorCode.SERVICE_UNAVAILABLE,
}


def _is_development(request: Request) -> bool:
    container = getattr(request.app.state, "container", None)
    return container is not None and container.settings.is_development


def client_address(request: Request) -> str:
    """Address of the calling client, used in logs and as the rate limit key."""
    return request.client.host if request.client else "unknown"


def error_response(
    request: Request,
    status_code: int,
    message: str,
    error_code: str,
    *,
    field: Optional[str] = None,
    exc: Optional[BaseException] = None,
    headers: Optional[dict[str, str]] = None,
) -> JSONResponse:
    """
    Build an error envelope.

    Args:
        request: Current request (path and method are echoed back).
        status_code: HTTP status.
        message: Client-safe message.
        error_code: Stable error code.
        field: Offending input field, if known.
        exc: Original exception; described only in development.
        headers: Extra response headers.
    """
    details: Optional[dict[str, Any]] = None
    if exc is not None and _is_development(request):
        details = {"originalMessage": str(exc), "type": type(exc).__name__}

    body = ErrorResponse(
        message=message,
        error=error_code,
        field=field,
        timestamp=utcnow(),
        path=request.url.path,
        method=request.method,
        details=details,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
        headers=headers,
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render an AppError with its own status and code."""
    if exc.status_code >= 500:
        logger.error(
            f"{request.method} {request.url.path} failed with {exc.error_code}: {exc.message}",
            exc_info=exc.__cause__ or exc,
        )
    else:
        logger.warning(
            f"{request.method} {request.url.path} -> {exc.status_code} {exc.error_code}: {exc.message}"
        )

    headers: dict[str, str] = {}
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers["WWW-Authenticate"] = "Bearer"
    if isinstance(exc, ServiceUnavailableError):
        headers["Retry-After"] = str(exc.retry_after_seconds)

    return error_response(
        request,
        exc.status_code,
        exc.message,
        exc.error_code,
        field=getattr(exc, "field", None),
        exc=exc.__cause__,
        headers=headers or None,
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report the first invalid body/query/path field as a 400."""
    field, message = describe_first_error(exc.errors())
    logger.warning(f"{request.method} {request.url.path} -> 400 VALIDATION_ERROR: {message}")
    return error_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        message,
        ErrorCode.VALIDATION_ERROR,
        field=field,
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Render routing errors (unknown route, wrong method) in the envelope."""
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        message = f"Route {request.url.path} not found"
        logger.warning(
            f"404 Not Found: {request.method} {request.url.path} from {client_address(request)}"
        )
    elif exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        message = f"Method {request.method} not allowed for {request.url.path}"
    else:
        message = str(exc.detail)

    error_code = _HTTP_ERROR_CODES.get(exc.status_code, ErrorCode.INTERNAL_ERROR)
    return error_response(
        request,
        exc.status_code,
        message,
        error_code,
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: log everything, tell the client nothing internal."""
    logger.exception(
        f"Unhandled error on {request.method} {request.url.path} "
        f"from {client_address(request)}: {exc}"
    )
    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        ErrorCode.INTERNAL_ERROR,
        exc=exc,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers on the application.

    Args:
        app: FastAPI application instance.
    """
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
