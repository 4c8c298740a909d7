"""
User seeding service.

``generate_new_users(count)``:
  count < 1   → one placeholder user with fixed values and the sentinel id -1
  count >= 1  → ``count`` random users from the generator, given every role
"""

from __future__ import annotations

from datetime import date

import structlog

from rolekeeper.config.settings import DEFAULT_SEED_PASSWORD
from rolekeeper.core.security import PasswordEncoder
from rolekeeper.db.models.user import RoleEnum, User
from rolekeeper.db.repositories import RoleStore, UserStore
from rolekeeper.services.users.generator import RandomUserGenerator

_log = structlog.get_logger(__name__)

UNASSIGNED_ID = -1

PLACEHOLDER_USERNAME = "userLogin"
PLACEHOLDER_EMAIL = "userEmail@example.com"
PLACEHOLDER_FULL_NAME = "userFullName"
PLACEHOLDER_ADDRESS = "userAddress"


class UserSeedingService:
    def __init__(
        self,
        role_store: RoleStore,
        user_store: UserStore,
        password_encoder: PasswordEncoder,
        generator: RandomUserGenerator,
        default_password: str = DEFAULT_SEED_PASSWORD,
    ) -> None:
        self._roles = role_store
        self._users = user_store
        self._encoder = password_encoder
        self._generator = generator
        self._default_password = default_password

    async def generate_new_users(self, count: int) -> list[User]:
        all_roles = await self._roles.find_all()

        if count < 1:
            default_roles = {role for role in all_roles if role.name == RoleEnum.GUEST.value}
            return [
                User(
                    id=UNASSIGNED_ID,
                    username=PLACEHOLDER_USERNAME,
                    password_hash=self._encoder.encode(self._default_password),
                    email=PLACEHOLDER_EMAIL,
                    full_name=PLACEHOLDER_FULL_NAME,
                    date_of_birth=date.today(),
                    address=PLACEHOLDER_ADDRESS,
                    roles=default_roles,
                )
            ]

        return self._generator.generate(count, all_roles)

    async def generate_test_data(self, count: int) -> None:
        """Generate users as ``generate_new_users`` does and persist the whole batch."""
        users = await self.generate_new_users(count)
        await self._users.create_all(users)
        _log.info("test_users_persisted", requested=count, persisted=len(users))
