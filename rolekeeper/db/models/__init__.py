"""Database model registry. Import all models here so Alembic can discover them."""

from rolekeeper.db.models.user import Role, RoleEnum, User, user_roles

__all__ = [
    "Role",
    "RoleEnum",
    "User",
    "user_roles",
]
