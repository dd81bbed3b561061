"""
Database engine, sessions and store error translation.

The engine owns a bounded connection pool. Store-level failures are mapped
onto the application error taxonomy so raw driver errors never reach clients.
"""

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import event, func, select, text
from sqlalchemy import exc as sa_exc
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from taskmanager.core.config import DatabaseConfig
from taskmanager.core.errors import (
    ConflictError,
    ErrorCode,
    ServiceUnavailableError,
    ValidationError,
)
from taskmanager.storage.tables import Base, TaskRecord, UserRecord

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE codes for integrity violations.
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
NOT_NULL_VIOLATION = "23502"
CHECK_VIOLATION = "23514"


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine(config: DatabaseConfig) -> AsyncEngine:
    """
    Create the async engine for the configured database.

    In-memory SQLite shares a single connection so every session sees the
    same database. Other SQLite URLs use the default pool; server databases
    get the bounded pool described by the config.
    """
    if config.is_sqlite:
        options: dict[str, Any] = {
            "echo": config.echo,
            "connect_args": {"check_same_thread": False},
        }
        if make_url(config.url).database in (None, "", ":memory:"):
            options["poolclass"] = StaticPool
        engine = create_async_engine(config.url, **options)
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_async_engine(
        config.url,
        echo=config.echo,
        pool_size=config.pool_size,
        max_overflow=config.max_overflow,
        pool_timeout=config.pool_timeout,
        pool_recycle=config.pool_recycle,
        pool_pre_ping=True,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to the engine."""
    return async_sessionmaker(engine, expire_on_commit=False)


async def create_schema(engine: AsyncEngine) -> None:
    """Create missing tables and indexes."""
    with store_errors():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema initialized")


def _sqlstate(error: sa_exc.DBAPIError) -> str | None:
    orig = error.orig
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def translate_integrity_error(error: sa_exc.IntegrityError) -> Exception:
    """Map a constraint violation onto the error taxonomy."""
    code = _sqlstate(error)
    detail = str(error.orig).lower()

    if code == UNIQUE_VIOLATION or "unique" in detail:
        return ConflictError("Resource already exists")
    if code == FOREIGN_KEY_VIOLATION or "foreign key" in detail:
        return ValidationError(
            "Invalid reference", error_code=ErrorCode.INVALID_REFERENCE
        )
    if code == NOT_NULL_VIOLATION or "not null" in detail:
        return ValidationError(
            "Required field missing", error_code=ErrorCode.MISSING_REQUIRED_FIELD
        )
    if code == CHECK_VIOLATION or "check constraint" in detail:
        return ValidationError("Invalid field value")
    return error


@contextmanager
def store_errors() -> Iterator[None]:
    """
    Translate database failures raised inside the block.

    Raises:
        ConflictError / ValidationError: For integrity violations.
        ServiceUnavailableError: When the database or pool is unavailable.
    """
    try:
        yield
    except sa_exc.IntegrityError as e:
        translated = translate_integrity_error(e)
        if translated is e:
            raise
        raise translated from e
    except sa_exc.TimeoutError as e:
        logger.warning(f"Database connection pool exhausted: {e}")
        raise ServiceUnavailableError("Database is busy, please retry") from e
    except (sa_exc.OperationalError, sa_exc.InterfaceError, OSError) as e:
        logger.error(f"Database unavailable: {e}")
        raise ServiceUnavailableError("Database connection failed") from e


def pool_status(engine: AsyncEngine) -> dict[str, int]:
    """Return pool counters where the pool implementation exposes them."""
    pool = engine.pool
    status: dict[str, int] = {}
    for name in ("size", "checkedin", "checkedout", "overflow"):
        counter = getattr(pool, name, None)
        if callable(counter):
            status[name] = int(counter())
    return status


async def check_database_health(engine: AsyncEngine) -> dict[str, Any]:
    """
    Run a connectivity probe and count rows in each table.

    Never raises; failures are reported in the returned dict.
    """
    start = time.perf_counter()
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
            users = await conn.scalar(select(func.count()).select_from(UserRecord))
            tasks = await conn.scalar(select(func.count()).select_from(TaskRecord))
    except Exception as e:
        logger.warning(f"Database health check failed: {e}")
        return {
            "healthy": False,
            "error": "Database unreachable",
        }

    return {
        "healthy": True,
        "response_time_ms": round((time.perf_counter() - start) * 1000, 2),
        "connection_pool": pool_status(engine),
        "tables": {"users": int(users or 0), "tasks": int(tasks or 0)},
    }
