"""
Storage package.

Provides store interfaces and their SQLAlchemy implementations.
"""

from taskmanager.storage.base import StoredCredentials, TaskStore, UserStore
from taskmanager.storage.database import (
    check_database_health,
    create_engine,
    create_schema,
    create_session_factory,
    pool_status,
    store_errors,
)
from taskmanager.storage.tables import Base, TaskRecord, UserRecord
from taskmanager.storage.tasks import SqlTaskStore
from taskmanager.storage.users import SqlUserStore

__all__ = [
    # Interfaces
    "StoredCredentials",
    "TaskStore",
    "UserStore",
    # Database
    "check_database_health",
    "create_engine",
    "create_schema",
    "create_session_factory",
    "pool_status",
    "store_errors",
    # Tables
    "Base",
    "TaskRecord",
    "UserRecord",
    # Implementations
    "SqlTaskStore",
    "SqlUserStore",
]
