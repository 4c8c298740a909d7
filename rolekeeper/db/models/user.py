"""
Database models for users and roles.

Users and roles are linked many-to-many through ``user_roles``. Neither
role names nor usernames carry a unique constraint; uniqueness of the
required entries is checked at startup instead.
"""

from __future__ import annotations

from datetime import date
from enum import StrEnum

from sqlalchemy import Column, Date, ForeignKey, String, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rolekeeper.db.base import Base, IntegerPrimaryKeyMixin


class RoleEnum(StrEnum):
    """Required roles, lowest privilege first."""

    GUEST = "ROLE_GUEST"
    USER = "ROLE_USER"
    ADMIN = "ROLE_ADMIN"
    SUPERADMIN = "ROLE_SUPERADMIN"


user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


class Role(Base, IntegerPrimaryKeyMixin):
    """Named permission group. Shared by reference between users."""

    __tablename__ = "roles"

    name: Mapped[str] = mapped_column(String(50), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Role {self.name}>"


class User(Base, IntegerPrimaryKeyMixin):
    """Account with a hashed password and a set of roles."""

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
    address: Mapped[str] = mapped_column(String(500), nullable=False)

    roles: Mapped[set[Role]] = relationship(secondary=user_roles, lazy="selectin")

    def has_role(self, role_name: str) -> bool:
        return any(role.name == role_name for role in self.roles)

    def __repr__(self) -> str:
        return f"<User {self.username}>"
