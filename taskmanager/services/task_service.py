"""
Owner-scoped task operations.

Every operation takes the caller's user ID. Tasks owned by someone else are
reported as not found, never as forbidden, so their existence does not leak.
"""

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any
from uuid import UUID

from taskmanager.core.errors import NotFoundError, ValidationError
from taskmanager.models.base import utcnow, validate_input
from taskmanager.models.task import Task, TaskCreate, TaskFilters, TaskUpdate
from taskmanager.storage.base import TaskStore

logger = logging.getLogger(__name__)

TASK_NOT_FOUND_MESSAGE = "Task not found"


def parse_task_id(task_id: UUID | str) -> UUID:
    """
    Parse a task ID.

    Raises:
        NotFoundError: If the value is not a valid UUID; such a task cannot exist.
    """
    if isinstance(task_id, UUID):
        return task_id
    try:
        return UUID(str(task_id))
    except ValueError as e:
        raise NotFoundError(TASK_NOT_FOUND_MESSAGE) from e


class TaskService:
    """CRUD on tasks within the caller's ownership scope."""

    def __init__(
        self,
        task_store: TaskStore,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._tasks = task_store
        self._clock = clock

    async def list_tasks(
        self,
        owner_id: UUID,
        filters: TaskFilters | Mapping[str, Any] | None = None,
    ) -> list[Task]:
        """
        List the owner's tasks, newest first.

        Args:
            owner_id: Caller's user ID.
            filters: Optional status/priority filters plus limit/offset.
        """
        filters = validate_input(TaskFilters, filters or {})
        return await self._tasks.list_for_owner(owner_id, filters)

    async def get_task(self, owner_id: UUID, task_id: UUID | str) -> Task:
        """
        Fetch one task.

        Raises:
            NotFoundError: If the task does not exist or belongs to another user.
        """
        task = await self._tasks.get(owner_id, parse_task_id(task_id))
        if task is None:
            raise NotFoundError(TASK_NOT_FOUND_MESSAGE)
        return task

    async def create_task(
        self, owner_id: UUID, data: TaskCreate | Mapping[str, Any]
    ) -> Task:
        """
        Create a task owned by the caller. New tasks always start as todo.

        Raises:
            ValidationError: Naming the violated constraint.
        """
        request = validate_input(TaskCreate, data)
        task = await self._tasks.create(owner_id, request, now=self._clock())
        logger.debug(f"Created task {task.id} for user {owner_id}")
        return task

    async def update_task(
        self,
        owner_id: UUID,
        task_id: UUID | str,
        patch: TaskUpdate | Mapping[str, Any],
    ) -> Task:
        """
        Apply a partial update.

        Only the supplied fields change; ``updated_at`` is refreshed.

        Raises:
            ValidationError: If the patch holds no recognized field or a value is invalid.
            NotFoundError: If the task does not exist or belongs to another user.
        """
        changes = validate_input(TaskUpdate, patch).changes()
        if not changes:
            raise ValidationError("No valid fields to update")

        task = await self._tasks.update(
            owner_id, parse_task_id(task_id), changes, now=self._clock()
        )
        if task is None:
            raise NotFoundError(TASK_NOT_FOUND_MESSAGE)
        return task

    async def delete_task(self, owner_id: UUID, task_id: UUID | str) -> None:
        """
        Permanently delete a task. Deleting twice reports not found.

        Raises:
            NotFoundError: If the task does not exist or belongs to another user.
        """
        deleted = await self._tasks.delete(owner_id, parse_task_id(task_id))
        if not deleted:
            raise NotFoundError(TASK_NOT_FOUND_MESSAGE)
        logger.debug(f"Deleted task {task_id} for user {owner_id}")
