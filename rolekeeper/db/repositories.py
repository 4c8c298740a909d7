"""
Role and user stores.

Services depend on the ``RoleStore`` / ``UserStore`` protocols; the
SQLAlchemy implementations work inside whatever transaction the caller's
session has open and only flush, never commit.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rolekeeper.db.models.user import Role, User


class RoleStore(Protocol):
    async def find_all(self) -> list[Role]: ...

    async def create(self, role: Role) -> Role: ...


class UserStore(Protocol):
    async def find_all(self) -> list[User]: ...

    async def create(self, user: User) -> User: ...

    async def create_all(self, users: Sequence[User]) -> list[User]: ...


def _release_unassigned_id(user: User) -> None:
    # ids below 1 mark a user built in memory and never persisted
    if user.id is not None and user.id < 1:
        user.id = None  # type: ignore[assignment]


class SqlAlchemyRoleStore:
    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def find_all(self) -> list[Role]:
        result = await self._db.execute(select(Role).order_by(Role.id))
        return list(result.scalars().all())

    async def create(self, role: Role) -> Role:
        self._db.add(role)
        await self._db.flush()
        return role


class SqlAlchemyUserStore:
    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def find_all(self) -> list[User]:
        result = await self._db.execute(select(User).order_by(User.id))
        return list(result.scalars().all())

    async def create(self, user: User) -> User:
        _release_unassigned_id(user)
        self._db.add(user)
        await self._db.flush()
        return user

    async def create_all(self, users: Sequence[User]) -> list[User]:
        for user in users:
            _release_unassigned_id(user)
        self._db.add_all(users)
        await self._db.flush()
        return list(users)
