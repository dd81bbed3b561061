"""
Application services module.

Contains the business logic for accounts, tokens and tasks.
"""

from taskmanager.services.auth_service import AuthService
from taskmanager.services.task_service import TaskService, parse_task_id
from taskmanager.services.token_service import TokenService

__all__ = [
    "AuthService",
    "TaskService",
    "TokenService",
    "parse_task_id",
]
