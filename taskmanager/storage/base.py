"""
Store interfaces.

Defines the abstract credential and task stores the services depend on.
Implementations may use any relational database; the SQLAlchemy-backed ones
live next to this module.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from taskmanager.models.task import Task, TaskCreate, TaskFilters
from taskmanager.models.user import User


@dataclass(frozen=True)
class StoredCredentials:
    """A user together with the stored password hash."""

    user: User
    password_hash: str


class UserStore(ABC):
    """Abstract credential store."""

    @abstractmethod
    async def create(
        self, name: str, email: str, password_hash: str, now: datetime
    ) -> User:
        """
        Persist a new user.

        Raises:
            ConflictError: If the email is already registered.
        """
        ...

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Retrieve a user by ID or None if not found."""
        ...

    @abstractmethod
    async def get_credentials(self, email: str) -> Optional[StoredCredentials]:
        """Retrieve a user and password hash by normalized email."""
        ...

    @abstractmethod
    async def email_exists(self, email: str) -> bool:
        """Whether a user with this normalized email exists."""
        ...


class TaskStore(ABC):
    """
    Abstract task store.

    Every operation is scoped to an owner; a task belonging to someone else
    behaves exactly like a missing one.
    """

    @abstractmethod
    async def list_for_owner(self, owner_id: UUID, filters: TaskFilters) -> list[Task]:
        """
        List tasks for an owner, newest first.

        Args:
            owner_id: Owning user.
            filters: Equality filters and pagination.

        Returns:
            List of tasks.
        """
        ...

    @abstractmethod
    async def get(self, owner_id: UUID, task_id: UUID) -> Optional[Task]:
        """Retrieve an owned task or None."""
        ...

    @abstractmethod
    async def create(self, owner_id: UUID, data: TaskCreate, now: datetime) -> Task:
        """Persist a new task with status todo."""
        ...

    @abstractmethod
    async def update(
        self, owner_id: UUID, task_id: UUID, changes: dict[str, Any], now: datetime
    ) -> Optional[Task]:
        """
        Apply changes to an owned task in a single conditional statement.

        Returns:
            The updated task, or None when no owned task matched.
        """
        ...

    @abstractmethod
    async def delete(self, owner_id: UUID, task_id: UUID) -> bool:
        """
        Delete an owned task.

        Returns:
            True if the task was deleted, False if not found.
        """
        ...

    @abstractmethod
    async def count_by_status(self) -> dict[str, int]:
        """Count all tasks grouped by status."""
        ...
