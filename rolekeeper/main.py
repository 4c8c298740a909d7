"""
rolekeeper startup runner.

Lifecycle:
  startup  → configure logging, run DB migrations, validate and reseed
  shutdown → dispose DB engine pool
"""

from __future__ import annotations

import asyncio
import sys

import pydantic
import structlog

from rolekeeper.config.logging_config import configure_logging
from rolekeeper.config.settings import Settings, get_settings
from rolekeeper.core.errors import AppError, ConfigurationError
from rolekeeper.core.security import BcryptPasswordEncoder
from rolekeeper.db.session import dispose_engine, get_session_factory
from rolekeeper.services.bootstrap.initializer import DatabaseInitializer

_log = structlog.get_logger(__name__)


def _load_settings() -> Settings:
    try:
        return get_settings()
    except pydantic.ValidationError as exc:
        raise ConfigurationError(
            "Invalid configuration",
            detail={"errors": [err["msg"] for err in exc.errors()]},
        ) from exc


def _run_migrations(settings: Settings) -> None:
    from alembic import command
    from alembic.config import Config

    # A failed migration is not fatal: the validity check below treats an
    # unreadable schema as invalid and the reseed recreates it.
    try:
        alembic_cfg = Config(str(settings.alembic_config_path))
        alembic_cfg.set_main_option("sqlalchemy.url", settings.database_url)
        command.upgrade(alembic_cfg, "head")
        _log.info("migrations_applied")
    except Exception as exc:
        _log.warning("migration_warning", error=type(exc).__name__, message=str(exc))


async def startup(settings: Settings | None = None) -> bool:
    """
    Run the startup sequence once.

    Returns True if the database had to be reseeded.
    """
    settings = settings or _load_settings()
    _log.info(
        "rolekeeper_starting",
        app=settings.app_name,
        version=settings.app_version,
        environment=settings.environment.value,
    )

    if settings.run_migrations_on_startup:
        await asyncio.to_thread(_run_migrations, settings)

    initializer = DatabaseInitializer(
        get_session_factory(settings),
        settings,
        BcryptPasswordEncoder(rounds=settings.bcrypt_rounds),
    )
    try:
        reseeded = await initializer.run()
    finally:
        await dispose_engine()

    _log.info("rolekeeper_ready", reseeded=reseeded)
    return reseeded


def run() -> None:
    """Console entry point. Exits with status 1 if startup aborts."""
    try:
        settings = _load_settings()
    except ConfigurationError as exc:
        configure_logging()
        _log.error("startup_failed", **exc.to_dict()["error"])
        sys.exit(1)

    configure_logging(
        log_level=settings.log_level.value,
        json_logs=settings.log_json,
        sql_echo=settings.db_echo,
    )
    try:
        asyncio.run(startup(settings))
    except AppError as exc:
        _log.error("startup_failed", **exc.to_dict()["error"])
        sys.exit(1)
