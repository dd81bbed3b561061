"""
FastAPI Application Entry Point.

Task Manager API: user accounts with bearer tokens and per-user tasks.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Response

from taskmanager.api.errors import register_exception_handlers
from taskmanager.api.middleware import register_middleware
from taskmanager.api.v1.dependencies.auth import get_optional_identity
from taskmanager.api.v1.schemas.common import ApiResponse
from taskmanager.api.v1.schemas.health import ServiceInfo
from taskmanager.core.config import Settings
from taskmanager.core.container import (
    Container,
    get_container,
    get_container_dep,
    get_settings_dep,
)
from taskmanager.core.logging_setup import setup_logging
from taskmanager.models.base import utcnow
from taskmanager.models.user import Identity

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events:
    - Startup: Configure logging, create schema, seed demo data, start metrics refresher
    - Shutdown: Stop the refresher and release database connections
    """
    container: Container = app.state.container
    settings = container.settings
    setup_logging(settings.log_level)

    # Startup
    await container.startup()
    logger.info(
        f"{settings.app_name} {settings.app_version} started "
        f"(environment={settings.environment.value}, CORS origin={settings.frontend_url})"
    )

    yield

    # Shutdown
    await container.shutdown()
    logger.info("Shutdown complete")


def create_app(container: Optional[Container] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        container: Optional container override. If None, uses the cached one.

    Returns:
        Configured FastAPI application instance.
    """
    container = container or get_container()
    settings = container.settings
    show_docs = settings.debug or settings.is_development

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description=(
            "Multi-user task manager. Register or log in to obtain a bearer "
            "token, then manage your own tasks."
        ),
        docs_url="/docs" if show_docs else None,
        redoc_url="/redoc" if show_docs else None,
        lifespan=lifespan,
    )
    app.state.container = container

    rate_limiter = container.get_rate_limiter() if settings.rate_limit.enabled else None
    register_middleware(app, settings, container.get_metrics(), rate_limiter)
    register_exception_handlers(app)

    # Register routes
    register_routes(app)

    return app


def register_routes(app: FastAPI) -> None:
    """
    Register all application routes.

    Args:
        app: FastAPI application instance.
    """
    # Import and register API v1 router
    from taskmanager.api.v1 import api_router
    from taskmanager.api.v1.endpoints import health

    app.include_router(api_router, prefix="/api/v1")
    app.include_router(health.router)

    container: Container = app.state.container
    if container.settings.metrics.enabled:

        @app.get(
            "/metrics",
            tags=["Metrics"],
            summary="Prometheus Metrics",
            include_in_schema=False,
        )
        async def metrics_endpoint(
            container: Container = Depends(get_container_dep),
        ) -> Response:
            """Prometheus text exposition."""
            await container.refresh_metrics()
            body, content_type = container.get_metrics().render()
            return Response(content=body, media_type=content_type)

    @app.get(
        "/",
        response_model=ApiResponse[ServiceInfo],
        response_model_exclude_none=True,
        tags=["Root"],
        summary="Root",
        description="Service information. Reports whether the caller is authenticated.",
    )
    async def root(
        identity: Optional[Identity] = Depends(get_optional_identity),
        settings: Settings = Depends(get_settings_dep),
    ) -> ApiResponse[ServiceInfo]:
        """Root endpoint."""
        info = ServiceInfo(
            name=settings.app_name,
            version=settings.app_version,
            environment=settings.environment.value,
            timestamp=utcnow(),
            authenticated=identity is not None,
        )
        return ApiResponse(data=info, message=settings.app_name)


# Create the application instance
app = create_app()

