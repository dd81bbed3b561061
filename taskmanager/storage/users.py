"""
SQLAlchemy-backed credential store.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from taskmanager.models.user import User
from taskmanager.storage.base import StoredCredentials, UserStore
from taskmanager.storage.database import store_errors
from taskmanager.storage.tables import UserRecord


class SqlUserStore(UserStore):
    """Credential store on top of the ``users`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def create(
        self, name: str, email: str, password_hash: str, now: datetime
    ) -> User:
        record = UserRecord(
            name=name,
            email=email,
            password_hash=password_hash,
            created_at=now,
            updated_at=now,
        )
        with store_errors():
            async with self._session_factory() as session:
                session.add(record)
                await session.commit()
        return User.model_validate(record)

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        with store_errors():
            async with self._session_factory() as session:
                record = await session.get(UserRecord, user_id)
        return User.model_validate(record) if record is not None else None

    async def get_credentials(self, email: str) -> Optional[StoredCredentials]:
        with store_errors():
            async with self._session_factory() as session:
                record = await session.scalar(
                    select(UserRecord).where(UserRecord.email == email)
                )
        if record is None:
            return None
        return StoredCredentials(
            user=User.model_validate(record),
            password_hash=record.password_hash,
        )

    async def email_exists(self, email: str) -> bool:
        with store_errors():
            async with self._session_factory() as session:
                user_id = await session.scalar(
                    select(UserRecord.id).where(UserRecord.email == email)
                )
        return user_id is not None
