"""
Dependency Injection Container for the task manager service.

Provides lazy initialization of shared resources. Each FastAPI application
holds one container on ``app.state``; dependencies resolve services from it.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from functools import lru_cache
from typing import TYPE_CHECKING

from fastapi import Request

from taskmanager.core.config import Settings, get_settings

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

    from taskmanager.core.metrics import Metrics
    from taskmanager.core.rate_limit import RateLimiter
    from taskmanager.core.security import PasswordHasher
    from taskmanager.services.auth_service import AuthService
    from taskmanager.services.task_service import TaskService
    from taskmanager.services.token_service import TokenService
    from taskmanager.storage.base import TaskStore, UserStore

logger = logging.getLogger(__name__)


class Container:
    """
    Dependency Injection Container.

    Manages lifecycle of shared resources:
    - Settings (configuration)
    - Database engine and session factory
    - Stores, token service, password hasher
    - Auth and task services
    - Metrics registry and its background refresher
    - Per-client rate limiter

    Usage:
        container = get_container()
        await container.startup()
        tasks = container.get_task_service()
        ...
        await container.shutdown()
    """

    def __init__(self, settings: Settings | None = None):
        """
        Initialize the container.

        Args:
            settings: Optional settings override. If None, loads from config.
        """
        self._settings = settings
        self._engine: "AsyncEngine | None" = None
        self._session_factory: "async_sessionmaker[AsyncSession] | None" = None
        self._user_store: "UserStore | None" = None
        self._task_store: "TaskStore | None" = None
        self._token_service: "TokenService | None" = None
        self._password_hasher: "PasswordHasher | None" = None
        self._auth_service: "AuthService | None" = None
        self._task_service: "TaskService | None" = None
        self._metrics: "Metrics | None" = None
        self._rate_limiter: "RateLimiter | None" = None
        self._metrics_task: asyncio.Task | None = None
        self._started_at = time.monotonic()

    @property
    def settings(self) -> Settings:
        """
        Get the application settings.

        Returns:
            Cached Settings instance.
        """
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def uptime_seconds(self) -> float:
        """Seconds since the container was created."""
        return time.monotonic() - self._started_at

    def get_engine(self) -> "AsyncEngine":
        """
        Get or create the database engine.

        The engine (and its connection pool) is lazily created on first access.
        Call close_engine() during shutdown to release connections.
        """
        if self._engine is None:
            from taskmanager.storage.database import create_engine

            self._engine = create_engine(self.settings.database)
        return self._engine

    async def close_engine(self) -> None:
        """Dispose of the engine and its pooled connections."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None

    def get_session_factory(self) -> "async_sessionmaker[AsyncSession]":
        """Get or create the session factory bound to the engine."""
        if self._session_factory is None:
            from taskmanager.storage.database import create_session_factory

            self._session_factory = create_session_factory(self.get_engine())
        return self._session_factory

    def get_user_store(self) -> "UserStore":
        """Get or create the credential store."""
        if self._user_store is None:
            from taskmanager.storage.users import SqlUserStore

            self._user_store = SqlUserStore(self.get_session_factory())
        return self._user_store

    def get_task_store(self) -> "TaskStore":
        """Get or create the task store."""
        if self._task_store is None:
            from taskmanager.storage.tasks import SqlTaskStore

            self._task_store = SqlTaskStore(self.get_session_factory())
        return self._task_store

    def get_token_service(self) -> "TokenService":
        """
        Get or create the token service.

        Raises:
            ValueError: If no signing secret is configured.
        """
        if self._token_service is None:
            from taskmanager.services.token_service import TokenService

            self._token_service = TokenService.from_settings(self.settings)
        return self._token_service

    def get_password_hasher(self) -> "PasswordHasher":
        """Get or create the password hasher."""
        if self._password_hasher is None:
            from taskmanager.core.security import PasswordHasher

            self._password_hasher = PasswordHasher(rounds=self.settings.auth.bcrypt_rounds)
        return self._password_hasher

    def get_auth_service(self) -> "AuthService":
        """Get or create the auth service."""
        if self._auth_service is None:
            from taskmanager.services.auth_service import AuthService

            self._auth_service = AuthService(
                user_store=self.get_user_store(),
                token_service=self.get_token_service(),
                password_hasher=self.get_password_hasher(),
            )
        return self._auth_service

    def get_task_service(self) -> "TaskService":
        """Get or create the task service."""
        if self._task_service is None:
            from taskmanager.services.task_service import TaskService

            self._task_service = TaskService(task_store=self.get_task_store())
        return self._task_service

    def get_metrics(self) -> "Metrics":
        """Get or create the metrics registry."""
        if self._metrics is None:
            from taskmanager.core.metrics import Metrics

            self._metrics = Metrics(prefix=self.settings.metrics.prefix)
        return self._metrics

    def get_rate_limiter(self) -> "RateLimiter":
        """Get or create the per-client request limiter."""
        if self._rate_limiter is None:
            from taskmanager.core.rate_limit import RateLimiter

            config = self.settings.rate_limit
            self._rate_limiter = RateLimiter(
                max_requests=config.max_requests,
                window=config.window,
            )
        return self._rate_limiter

    async def refresh_metrics(self) -> None:
        """
        Refresh database gauges.

        Best effort: failures are logged and never propagate.
        """
        from taskmanager.storage.database import pool_status

        metrics = self.get_metrics()
        try:
            metrics.update_db_connections(pool_status(self.get_engine()))
            metrics.update_task_counts(await self.get_task_store().count_by_status())
        except Exception as e:
            logger.warning(f"Failed to update task metrics: {e}")

    async def _metrics_loop(self) -> None:
        interval = self.settings.metrics.refresh_interval_seconds
        while True:
            await self.refresh_metrics()
            await asyncio.sleep(interval)

    async def startup(self) -> None:
        """
        Initialize resources on application startup.

        Called by FastAPI lifespan context manager.
        Creates the schema, seeds demo data if configured and starts the
        metrics refresher.
        """
        settings = self.settings
        # Fail fast on a missing signing secret
        _ = self.get_token_service()

        if settings.database.create_schema:
            from taskmanager.storage.database import create_schema

            await create_schema(self.get_engine())

        if settings.database.seed_demo_data:
            from taskmanager.storage.seed import seed_demo_data

            await seed_demo_data(
                self.get_user_store(),
                self.get_task_store(),
                self.get_password_hasher(),
            )

        if settings.metrics.enabled and self._metrics_task is None:
            self._metrics_task = asyncio.create_task(self._metrics_loop())

    async def shutdown(self) -> None:
        """
        Clean up resources on application shutdown.

        Called by FastAPI lifespan context manager.
        """
        if self._metrics_task is not None:
            self._metrics_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._metrics_task
            self._metrics_task = None
        await self.close_engine()


# Global container instance using lru_cache for singleton behavior
@lru_cache
def get_container() -> Container:
    """
    Get the cached container instance.

    Uses lru_cache to ensure container is a singleton.
    Call get_container.cache_clear() to reset (useful for testing).

    Returns:
        Cached Container instance.
    """
    return Container()


def clear_container_cache() -> None:
    """
    Clear the container cache.

    Useful for testing to reset the container state.
    Also clears the settings cache.
    """
    get_container.cache_clear()
    get_settings.cache_clear()


# Convenience functions for FastAPI dependencies
def get_container_dep(request: Request) -> Container:
    """
    FastAPI dependency for the container of the current application.

    Usage:
        @app.get("/")
        async def root(container: Container = Depends(get_container_dep)):
            ...
    """
    return request.app.state.container


def get_settings_dep(request: Request) -> Settings:
    """FastAPI dependency for getting settings."""
    return get_container_dep(request).settings


def get_auth_service_dep(request: Request) -> "AuthService":
    """
    FastAPI dependency for getting the auth service.

    Usage:
        @router.post("/login")
        async def login(
            body: LoginRequest,
            auth: AuthService = Depends(get_auth_service_dep),
        ):
            return await auth.login(body)
    """
    return get_container_dep(request).get_auth_service()


def get_task_service_dep(request: Request) -> "TaskService":
    """FastAPI dependency for getting the task service."""
    return get_container_dep(request).get_task_service()


def get_token_service_dep(request: Request) -> "TokenService":
    """FastAPI dependency for getting the token service."""
    return get_container_dep(request).get_token_service()


def get_metrics_dep(request: Request) -> "Metrics":
    """FastAPI dependency for getting the metrics registry."""
    return get_container_dep(request).get_metrics()
