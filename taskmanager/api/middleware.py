"""
HTTP middleware: rate limiting, security headers, request metrics,
compression and CORS.
"""

import logging
import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from taskmanager.api.errors import client_address, error_response
from taskmanager.core.config import Settings
from taskmanager.core.errors import RateLimitError
from taskmanager.core.metrics import UNMATCHED_ROUTE, Metrics
from taskmanager.core.rate_limit import RateLimiter

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Resource-Policy": "same-origin",
}
CONTENT_SECURITY_POLICY = "default-src 'self'; frame-ancestors 'none'"

# Interactive docs load their assets from a CDN.
_DOCS_PATHS = ("/docs", "/redoc", "/openapi.json")


def route_template(request: Request) -> str:
    """
    Return the matched route's full path template, e.g. ``/api/v1/tasks/{task_id}``.

    Routes of an included router may carry a path relative to the include
    prefix, so the concrete leading segments of the request path that the
    route's own path does not cover are kept in front of it.
    """
    route = request.scope.get("route")
    route_path = getattr(route, "path", None)
    if route_path is None:
        return UNMATCHED_ROUTE
    segments = request.url.path.split("/")
    keep = max(0, len(segments) - route_path.count("/"))
    return "/".join(segments[:keep]) + route_path or "/"


def register_middleware(
    app: FastAPI,
    settings: Settings,
    metrics: Metrics,
    rate_limiter: Optional[RateLimiter] = None,
) -> None:
    """
    Install rate limiting, security headers, request metrics, compression and CORS.

    Args:
        app: FastAPI application instance.
        settings: Application settings.
        metrics: Metrics registry that receives request observations.
        rate_limiter: Per-client limiter; None disables limiting.
    """
    if rate_limiter is not None:

        @app.middleware("http")
        async def rate_limit_middleware(request: Request, call_next):
            client = client_address(request)
            state = rate_limiter.hit(client)
            if not state.allowed:
                logger.warning(
                    f"Rate limit exceeded for {client}: {request.method} {request.url.path}"
                )
                error = RateLimitError()
                return error_response(
                    request,
                    error.status_code,
                    error.message,
                    error.error_code,
                    headers={**state.headers(), "Retry-After": str(state.reset_after)},
                )
            response = await call_next(request)
            response.headers.update(state.headers())
            return response

    @app.middleware("http")
    async def security_headers_middleware(request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        if not request.url.path.startswith(_DOCS_PATHS):
            response.headers.setdefault("Content-Security-Policy", CONTENT_SECURITY_POLICY)
        return response

    if settings.metrics.enabled:

        @app.middleware("http")
        async def request_metrics_middleware(request: Request, call_next):
            start = time.perf_counter()
            status_code = 500
            try:
                response = await call_next(request)
                status_code = response.status_code
                return response
            finally:
                metrics.observe_request(
                    request.method,
                    route_template(request),
                    status_code,
                    time.perf_counter() - start,
                )

    if settings.compression.enabled:
        app.add_middleware(
            GZipMiddleware,
            minimum_size=settings.compression.minimum_size,
            compresslevel=settings.compression.compresslevel,
        )

    # Configure CORS (outermost, so preflight requests short-circuit here)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
