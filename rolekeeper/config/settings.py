"""
Application configuration via Pydantic Settings.

All values are sourced from environment variables or an .env file.
"""

from __future__ import annotations

from enum import StrEnum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Password given to every seeded account. Known weak; kept so existing
# deployments can still log in with the documented credentials.
DEFAULT_SEED_PASSWORD = "1"


class Environment(StrEnum):
    """Deployment environment identifiers."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


class LogLevel(StrEnum):
    """Structured log level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ResetStrategy(StrEnum):
    """How the datastore is emptied before a reseed."""

    RECREATE = "recreate"
    TRUNCATE = "truncate"


class Settings(BaseSettings):
    """
    Centralised, type-validated application configuration.

    Reads from environment variables with an optional .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="forbid",
    )

    # ── Application ────────────────────────────────────────────────────── #
    app_name: str = Field(default="rolekeeper", description="Human-readable application name")
    app_version: str = Field(default="0.1.0", description="Semantic version string")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Deployment environment (development|testing|production)",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode. Must be False in production.",
    )

    # ── Database ───────────────────────────────────────────────────────── #
    database_url: str = Field(
        default="sqlite+aiosqlite:///./rolekeeper.db",
        description=(
            "Async SQLAlchemy connection string. "
            "Use sqlite+aiosqlite:// for local or postgresql+asyncpg:// for production."
        ),
    )
    db_pool_size: int = Field(default=5, ge=1, le=50, description="Connection pool size")
    db_max_overflow: int = Field(default=10, ge=0, le=100, description="Pool max overflow")
    db_echo: bool = Field(default=False, description="Log all SQL statements (debug only)")

    # ── Migrations ─────────────────────────────────────────────────────── #
    run_migrations_on_startup: bool = Field(
        default=True,
        description="Apply Alembic migrations before the validity check",
    )
    alembic_config_path: Path = Field(
        default=Path("alembic.ini"),
        description="Path to alembic.ini",
    )

    # ── Seeding ────────────────────────────────────────────────────────── #
    reset_strategy: ResetStrategy = Field(
        default=ResetStrategy.RECREATE,
        description="recreate drops and recreates tables; truncate deletes all rows",
    )
    seed_random_user_count: int = Field(
        default=6,
        ge=1,
        le=1000,
        description="Random filler users added after the bootstrap accounts",
    )
    seed_default_password: SecretStr = Field(
        default=SecretStr(DEFAULT_SEED_PASSWORD),
        description="Plaintext password given to every seeded user. Weak by default.",
    )
    bcrypt_rounds: int = Field(default=12, ge=4, le=31, description="bcrypt cost factor")
    random_seed: int | None = Field(
        default=None,
        description="Seed for the random user generator (None = nondeterministic)",
    )

    # ── Logging ────────────────────────────────────────────────────────── #
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Minimum log level")
    log_json: bool = Field(default=True, description="Emit logs as JSON (False for dev console)")

    # ── Validators ─────────────────────────────────────────────────────── #

    @model_validator(mode="after")
    def production_safety_checks(self) -> Settings:
        if self.environment == Environment.PRODUCTION:
            if self.debug:
                raise ValueError("debug must be False in production")
            if self.db_echo:
                raise ValueError("db_echo must be False in production")
        return self

    @property
    def uses_default_password(self) -> bool:
        return self.seed_default_password.get_secret_value() == DEFAULT_SEED_PASSWORD


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached Settings singleton."""
    return Settings()
