"""
Shared pytest fixtures for rolekeeper tests.

Provides:
  - async SQLite in-memory database (per-test isolation)
  - fast bcrypt encoder and a deterministic fake encoder
  - in-memory role/user stores for service-level tests
"""
from __future__ import annotations

import random
from collections.abc import AsyncGenerator, Sequence

import pytest
import pytest_asyncio
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from rolekeeper.config.settings import Settings
from rolekeeper.core.security import BcryptPasswordEncoder
from rolekeeper.db.base import Base
from rolekeeper.db.models.user import Role, RoleEnum, User
from rolekeeper.db.session import build_session_factory, enable_sqlite_transactional_ddl
from rolekeeper.services.users.generator import RandomUserGenerator


# ─── Settings override ────────────────────────────────────────────────────────

def make_settings(**overrides) -> Settings:
    fields = dict(
        database_url="sqlite+aiosqlite:///:memory:",
        environment="testing",
        debug=True,
        run_migrations_on_startup=False,
        bcrypt_rounds=4,
        random_seed=1234,
        log_json=False,
    )
    fields.update(overrides)
    return Settings(**fields)


TEST_SETTINGS = make_settings()


# ─── Encoders ─────────────────────────────────────────────────────────────────

class FakePasswordEncoder:
    """Deterministic encoder so tests can compare hashes directly."""

    def encode(self, plain: str) -> str:
        return f"encoded:{plain}"

    def matches(self, plain: str, hashed: str) -> bool:
        return hashed == self.encode(plain)


@pytest.fixture
def fake_encoder() -> FakePasswordEncoder:
    return FakePasswordEncoder()


@pytest.fixture
def bcrypt_encoder() -> BcryptPasswordEncoder:
    return BcryptPasswordEncoder(rounds=4)


@pytest.fixture
def generator(fake_encoder) -> RandomUserGenerator:
    return RandomUserGenerator(fake_encoder, rng=random.Random(42))


# ─── In-memory stores ─────────────────────────────────────────────────────────

class InMemoryRoleStore:
    def __init__(self, roles: Sequence[Role] = ()) -> None:
        self.roles = list(roles)

    async def find_all(self) -> list[Role]:
        return list(self.roles)

    async def create(self, role: Role) -> Role:
        self.roles.append(role)
        return role


class InMemoryUserStore:
    def __init__(self, users: Sequence[User] = ()) -> None:
        self.users = list(users)
        self.create_calls = 0
        self.create_all_calls = 0

    async def find_all(self) -> list[User]:
        return list(self.users)

    async def create(self, user: User) -> User:
        self.create_calls += 1
        self.users.append(user)
        return user

    async def create_all(self, users: Sequence[User]) -> list[User]:
        self.create_all_calls += 1
        self.users.extend(users)
        return list(users)


class BrokenStore:
    """Store whose reads fail as if the table did not exist."""

    async def find_all(self) -> list:
        raise OperationalError("SELECT * FROM roles", {}, Exception("no such table: roles"))


def make_catalog(*names: str) -> list[Role]:
    return [Role(id=index, name=name) for index, name in enumerate(names, start=1)]


def full_catalog() -> list[Role]:
    return make_catalog(*(role.value for role in RoleEnum))


def make_user(username: str, *roles: Role) -> User:
    return User(username=username, roles=set(roles))


def bootstrap_users(catalog: Sequence[Role]) -> list[User]:
    return [make_user(name, *catalog[: index + 1]) for index, name in enumerate(
        ("guest", "user", "admin", "superadmin")
    )]


# ─── Database ─────────────────────────────────────────────────────────────────

@pytest_asyncio.fixture(scope="function")
async def bare_engine():
    """In-memory engine with no tables."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_transactional_ddl(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_engine(bare_engine):
    """In-memory engine with the schema created."""
    async with bare_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield bare_engine


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    return build_session_factory(db_engine)


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Provide an async session that rolls back after each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()
