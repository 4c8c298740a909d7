"""
Datastore reset strategies.

Both strategies run on the caller's session, inside its open transaction,
and are safe to run against an already-empty database.
"""

from __future__ import annotations

from typing import Protocol

import structlog
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from rolekeeper.config.settings import ResetStrategy
from rolekeeper.db.base import Base
from rolekeeper.db.models.user import Role, User, user_roles

_log = structlog.get_logger(__name__)


class DatabaseResetter(Protocol):
    async def reset(self) -> None: ...


class SchemaRecreateResetter:
    """Drop every mapped table that exists, then create them all again."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def reset(self) -> None:
        conn = await self._db.connection()
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
        _log.info("database_reset", strategy=ResetStrategy.RECREATE.value)


class TableTruncateResetter:
    """Delete all rows; the junction table goes first."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def reset(self) -> None:
        await self._db.execute(delete(user_roles))
        await self._db.execute(delete(User))
        await self._db.execute(delete(Role))
        self._db.expunge_all()
        _log.info("database_reset", strategy=ResetStrategy.TRUNCATE.value)


def build_resetter(strategy: ResetStrategy, db: AsyncSession) -> DatabaseResetter:
    if strategy == ResetStrategy.TRUNCATE:
        return TableTruncateResetter(db)
    return SchemaRecreateResetter(db)
