"""
Database validity check.

The database is valid when each required role exists exactly once and each
bootstrap account exists exactly once holding its designated role. A
persistence fault while reading counts as invalid, so a missing schema and
missing data take the same recovery path.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog
from sqlalchemy.exc import SQLAlchemyError

from rolekeeper.core.errors import DatabaseValidationError
from rolekeeper.db.models.user import Role, RoleEnum, User
from rolekeeper.db.repositories import RoleStore, UserStore

_log = structlog.get_logger(__name__)

REQUIRED_ROLES: tuple[str, ...] = tuple(role.value for role in RoleEnum)

# Positional: index i is given the first i+1 roles of REQUIRED_ROLES.
BOOTSTRAP_USERS: tuple[tuple[str, str], ...] = (
    ("guest", RoleEnum.GUEST.value),
    ("user", RoleEnum.USER.value),
    ("admin", RoleEnum.ADMIN.value),
    ("superadmin", RoleEnum.SUPERADMIN.value),
)


def is_role_unique(role_name: str, roles: Sequence[Role]) -> bool:
    """True if exactly one role in ``roles`` is named ``role_name``."""
    return sum(1 for role in roles if role.name == role_name) == 1


def is_user_unique(username: str, role_name: str, users: Sequence[User]) -> bool:
    """True if exactly one user has ``username`` and holds ``role_name``."""
    matches = sum(1 for user in users if user.username == username and user.has_role(role_name))
    return matches == 1


def find_violation(roles: Sequence[Role], users: Sequence[User]) -> DatabaseValidationError | None:
    """Return the first failed check, or None when every check passes."""
    for role_name in REQUIRED_ROLES:
        if not is_role_unique(role_name, roles):
            return DatabaseValidationError(
                check=f"role:{role_name}",
                message=f"The '{role_name}' role does not exist or is not unique",
            )
    for username, role_name in BOOTSTRAP_USERS:
        if not is_user_unique(username, role_name, users):
            return DatabaseValidationError(
                check=f"user:{username}",
                message=(
                    f"The user with username '{username}' and role '{role_name}' "
                    "does not exist or is not unique"
                ),
            )
    return None


class DatabaseValidityChecker:
    def __init__(self, role_store: RoleStore, user_store: UserStore) -> None:
        self._roles = role_store
        self._users = user_store

    async def is_valid(self) -> bool:
        try:
            roles = await self._roles.find_all()
            users = await self._users.find_all()
        except SQLAlchemyError as exc:
            _log.warning(
                "database_unreadable",
                error=type(exc).__name__,
                message=str(exc).splitlines()[0] if str(exc) else "",
            )
            return False

        violation = find_violation(roles, users)
        if violation is not None:
            _log.warning(
                "database_invalid",
                code=violation.code.value,
                check=violation.check,
                message=violation.message,
            )
            return False

        _log.info("database_valid", roles=len(roles), users=len(users))
        return True
