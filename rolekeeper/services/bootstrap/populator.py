"""
Seed population.

Runs after a reset. Order matters:
  1. create the four roles (ids 1..4)
  2. generate four placeholder users from the random generator
  3. overwrite their usernames by position (guest, user, admin, superadmin)
  4. give them cumulative role sets
  5. persist them one at a time
  6. add a batch of random users through the seeding service
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from sqlalchemy.exc import SQLAlchemyError

from rolekeeper.core.errors import SeedingError
from rolekeeper.db.models.user import Role
from rolekeeper.db.repositories import RoleStore, UserStore
from rolekeeper.services.bootstrap.validity import BOOTSTRAP_USERS, REQUIRED_ROLES
from rolekeeper.services.users.generator import RandomUserGenerator
from rolekeeper.services.users.seeding import UserSeedingService

_log = structlog.get_logger(__name__)

DEFAULT_RANDOM_USER_COUNT = 6


@contextmanager
def _step(name: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        raise SeedingError(step=name, message=str(exc).splitlines()[0]) from exc
    _log.debug("populate_step_done", step=name)


class SeedPopulator:
    def __init__(
        self,
        role_store: RoleStore,
        user_store: UserStore,
        generator: RandomUserGenerator,
        seeding_service: UserSeedingService,
        random_user_count: int = DEFAULT_RANDOM_USER_COUNT,
    ) -> None:
        self._roles = role_store
        self._users = user_store
        self._generator = generator
        self._seeding = seeding_service
        self._random_user_count = random_user_count

    async def populate(self) -> None:
        with _step("create_roles"):
            roles: list[Role] = []
            for role_id, name in enumerate(REQUIRED_ROLES, start=1):
                roles.append(await self._roles.create(Role(id=role_id, name=name)))

        with _step("generate_bootstrap_users"):
            users = self._generator.generate(len(BOOTSTRAP_USERS), await self._roles.find_all())
        if len(users) < len(BOOTSTRAP_USERS):
            raise SeedingError(
                step="generate_bootstrap_users",
                message=f"generator returned {len(users)} users, need {len(BOOTSTRAP_USERS)}",
            )

        for index, (username, _role_name) in enumerate(BOOTSTRAP_USERS):
            users[index].username = username
            users[index].roles = set(roles[: index + 1])

        with _step("create_bootstrap_users"):
            for user in users[: len(BOOTSTRAP_USERS)]:
                await self._users.create(user)
                _log.info(
                    "bootstrap_user_created",
                    username=user.username,
                    roles=sorted(role.name for role in user.roles),
                )

        with _step("create_random_users"):
            await self._seeding.generate_test_data(self._random_user_count)

        _log.info(
            "test_data_populated",
            roles=len(roles),
            bootstrap_users=len(BOOTSTRAP_USERS),
            random_users=self._random_user_count,
        )
