"""
Structured error taxonomy for rolekeeper.

Every application error has:
  - A stable error code (prefixed by domain)
  - A human-readable message
  - An optional detail dict for log consumers
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Stable error codes. Never reuse a retired code."""

    # Seeding
    SEED_VALIDATION_FAILED = "SEED_001"
    SEED_RESET_FAILED = "SEED_002"
    SEED_POPULATE_FAILED = "SEED_003"

    # Configuration
    CONFIG_INVALID = "CFG_001"


class AppError(Exception):
    """Base class for all application errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        detail: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.detail = detail or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "detail": self.detail,
            }
        }


# ── Typed convenience subclasses ──────────────────────────────────────── #


class DatabaseValidationError(AppError):
    """A required role or bootstrap user is missing or not unique."""

    def __init__(self, check: str, message: str) -> None:
        super().__init__(
            code=ErrorCode.SEED_VALIDATION_FAILED,
            message=message,
            detail={"check": check},
        )
        self.check = check


class SeedingError(AppError):
    """Persistence fault while resetting or repopulating. Fatal at startup."""

    def __init__(self, step: str, message: str, code: ErrorCode = ErrorCode.SEED_POPULATE_FAILED) -> None:
        super().__init__(code=code, message=f"{step}: {message}", detail={"step": step})
        self.step = step


class ConfigurationError(AppError):
    def __init__(self, message: str, detail: dict[str, Any] | None = None) -> None:
        super().__init__(code=ErrorCode.CONFIG_INVALID, message=message, detail=detail)
