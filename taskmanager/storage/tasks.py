"""
SQLAlchemy-backed task store.

Ownership is part of every WHERE clause, so a task owned by another user is
indistinguishable from one that does not exist.
"""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID, uuid4

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from taskmanager.models.task import Task, TaskCreate, TaskFilters, TaskStatus
from taskmanager.storage.base import TaskStore
from taskmanager.storage.database import store_errors
from taskmanager.storage.tables import TaskRecord


def _column_value(value: Any) -> Any:
    # Enum members are stored by value.
    return getattr(value, "value", value)


class SqlTaskStore(TaskStore):
    """Task store on top of the ``tasks`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def list_for_owner(self, owner_id: UUID, filters: TaskFilters) -> list[Task]:
        stmt = select(TaskRecord).where(TaskRecord.owner_id == owner_id)
        if filters.status is not None:
            stmt = stmt.where(TaskRecord.status == filters.status.value)
        if filters.priority is not None:
            stmt = stmt.where(TaskRecord.priority == filters.priority.value)
        stmt = (
            stmt.order_by(TaskRecord.created_at.desc())
            .limit(filters.limit)
            .offset(filters.offset)
        )

        with store_errors():
            async with self._session_factory() as session:
                records = (await session.scalars(stmt)).all()
        return [Task.model_validate(record) for record in records]

    async def get(self, owner_id: UUID, task_id: UUID) -> Optional[Task]:
        stmt = select(TaskRecord).where(
            TaskRecord.id == task_id,
            TaskRecord.owner_id == owner_id,
        )
        with store_errors():
            async with self._session_factory() as session:
                record = await session.scalar(stmt)
        return Task.model_validate(record) if record is not None else None

    async def create(self, owner_id: UUID, data: TaskCreate, now: datetime) -> Task:
        record = TaskRecord(
            id=uuid4(),
            title=data.title,
            description=data.description,
            status=TaskStatus.TODO.value,
            priority=data.priority.value,
            owner_id=owner_id,
            created_at=now,
            updated_at=now,
        )
        with store_errors():
            async with self._session_factory() as session:
                session.add(record)
                await session.commit()
        return Task.model_validate(record)

    async def update(
        self, owner_id: UUID, task_id: UUID, changes: dict[str, Any], now: datetime
    ) -> Optional[Task]:
        values = {field: _column_value(value) for field, value in changes.items()}
        values["updated_at"] = now
        stmt = (
            update(TaskRecord)
            .where(TaskRecord.id == task_id, TaskRecord.owner_id == owner_id)
            .values(**values)
            .returning(TaskRecord)
            .execution_options(synchronize_session=False)
        )
        with store_errors():
            async with self._session_factory() as session:
                record = (await session.scalars(stmt)).one_or_none()
                await session.commit()
        return Task.model_validate(record) if record is not None else None

    async def delete(self, owner_id: UUID, task_id: UUID) -> bool:
        stmt = (
            delete(TaskRecord)
            .where(TaskRecord.id == task_id, TaskRecord.owner_id == owner_id)
            .execution_options(synchronize_session=False)
        )
        with store_errors():
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                await session.commit()
        return result.rowcount > 0

    async def count_by_status(self) -> dict[str, int]:
        stmt = select(TaskRecord.status, func.count()).group_by(TaskRecord.status)
        with store_errors():
            async with self._session_factory() as session:
                rows = (await session.execute(stmt)).all()
        return {status: int(count) for status, count in rows}
