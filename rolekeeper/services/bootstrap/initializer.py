"""
Startup database initializer.

Checks the database in a read-only session; when the check fails, resets and
repopulates it inside a single transaction so a failed reseed leaves nothing
half-written.
"""

from __future__ import annotations

import random

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rolekeeper.config.settings import Settings
from rolekeeper.core.errors import ErrorCode, SeedingError
from rolekeeper.core.security import PasswordEncoder
from rolekeeper.db.repositories import SqlAlchemyRoleStore, SqlAlchemyUserStore
from rolekeeper.db.session import session_scope
from rolekeeper.services.bootstrap.populator import SeedPopulator
from rolekeeper.services.bootstrap.resetter import build_resetter
from rolekeeper.services.bootstrap.validity import DatabaseValidityChecker
from rolekeeper.services.users.generator import RandomUserGenerator
from rolekeeper.services.users.seeding import UserSeedingService

_log = structlog.get_logger(__name__)


class DatabaseInitializer:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        settings: Settings,
        password_encoder: PasswordEncoder,
        generator: RandomUserGenerator | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._settings = settings
        self._encoder = password_encoder
        self._default_password = settings.seed_default_password.get_secret_value()
        self._generator = generator or RandomUserGenerator(
            password_encoder,
            rng=random.Random(settings.random_seed),
            default_password=self._default_password,
        )

    async def run(self) -> bool:
        """
        Validate the database and reseed it if needed.

        Returns:
            True if the database was reseeded, False if it was already valid.

        Raises:
            SeedingError: If the reset or populate step fails. The reseed
                transaction is rolled back.
        """
        if await self.is_database_valid():
            return False

        if self._settings.uses_default_password:
            _log.warning("seed_default_password_in_use")

        async with session_scope(self._session_factory) as db:
            await self._reset(db)
            await self._populator(db).populate()

        _log.info("database_reseeded")
        return True

    async def is_database_valid(self) -> bool:
        async with self._session_factory() as db:
            checker = DatabaseValidityChecker(SqlAlchemyRoleStore(db), SqlAlchemyUserStore(db))
            return await checker.is_valid()

    async def _reset(self, db: AsyncSession) -> None:
        resetter = build_resetter(self._settings.reset_strategy, db)
        try:
            await resetter.reset()
        except SQLAlchemyError as exc:
            raise SeedingError(
                step=f"reset:{self._settings.reset_strategy.value}",
                message=str(exc).splitlines()[0],
                code=ErrorCode.SEED_RESET_FAILED,
            ) from exc

    def _populator(self, db: AsyncSession) -> SeedPopulator:
        role_store = SqlAlchemyRoleStore(db)
        user_store = SqlAlchemyUserStore(db)
        seeding = UserSeedingService(
            role_store,
            user_store,
            self._encoder,
            self._generator,
            default_password=self._default_password,
        )
        return SeedPopulator(
            role_store,
            user_store,
            self._generator,
            seeding,
            random_user_count=self._settings.seed_random_user_count,
        )
