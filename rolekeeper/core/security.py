"""
Password hashing and the encoder used when seeding accounts.

Secrets are never logged.
"""

from __future__ import annotations

import hashlib
from typing import Protocol

import bcrypt

DEFAULT_BCRYPT_ROUNDS = 12


# ── Password ──────────────────────────────────────────────────────────── #


def _normalize(plain: str) -> bytes:
    # bcrypt truncates at 72 bytes; hash first so long secrets stay distinct
    return hashlib.sha256(plain.encode("utf-8")).hexdigest().encode("utf-8")


def hash_password(plain: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """Return a bcrypt hash of the given plaintext password."""
    return bcrypt.hashpw(_normalize(plain), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """
    Verify a plaintext password against a stored hash.

    Returns False (never raises) on a malformed hash.
    """
    try:
        return bcrypt.checkpw(_normalize(plain), hashed.encode("utf-8"))
    except ValueError:
        return False


# ── Encoder ───────────────────────────────────────────────────────────── #


class PasswordEncoder(Protocol):
    """One-way password encoding collaborator."""

    def encode(self, plain: str) -> str: ...

    def matches(self, plain: str, hashed: str) -> bool: ...


class BcryptPasswordEncoder:
    """PasswordEncoder backed by bcrypt with a configurable cost factor."""

    def __init__(self, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> None:
        self._rounds = rounds

    def encode(self, plain: str) -> str:
        return hash_password(plain, rounds=self._rounds)

    def matches(self, plain: str, hashed: str) -> bool:
        return verify_password(plain, hashed)


__all__ = [
    "BcryptPasswordEncoder",
    "DEFAULT_BCRYPT_ROUNDS",
    "PasswordEncoder",
    "hash_password",
    "verify_password",
]
