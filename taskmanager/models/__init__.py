"""
Pydantic models for the task manager service.

This module exports all domain models used by the services and the API.
"""

from taskmanager.models.base import (
    CamelModel,
    describe_first_error,
    utcnow,
    validate_input,
)
from taskmanager.models.task import (
    # Enums
    TaskPriority,
    TaskStatus,
    # Models
    Task,
    # Inputs
    TaskCreate,
    TaskFilters,
    TaskUpdate,
)
from taskmanager.models.user import (
    AuthResult,
    Identity,
    LoginRequest,
    RegisterRequest,
    User,
)

__all__ = [
    # Helpers
    "CamelModel",
    "describe_first_error",
    "utcnow",
    "validate_input",
    # Task Enums
    "TaskPriority",
    "TaskStatus",
    # Task Models
    "Task",
    "TaskCreate",
    "TaskFilters",
    "TaskUpdate",
    # User Models
    "AuthResult",
    "Identity",
    "LoginRequest",
    "RegisterRequest",
    "User",
]
