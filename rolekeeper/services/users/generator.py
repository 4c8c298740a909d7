"""
Synthetic user generation.

Produces transient ``User`` objects with plausible names, emails, addresses
and birth dates. Users are not added to any session; ids stay unset so the
database assigns them on insert.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from datetime import date, timedelta

import structlog

from rolekeeper.config.settings import DEFAULT_SEED_PASSWORD
from rolekeeper.core.security import PasswordEncoder
from rolekeeper.db.models.user import Role, User

_log = structlog.get_logger(__name__)

FIRST_NAMES = (
    "Alice", "Boris", "Clara", "Daniel", "Elena", "Felix", "Galina", "Hugo",
    "Irina", "Jonas", "Katya", "Leon", "Maria", "Nikita", "Olga", "Pavel",
    "Quinn", "Rosa", "Sergei", "Tanya", "Umar", "Vera", "Walter", "Yana",
)
LAST_NAMES = (
    "Anderson", "Belov", "Carter", "Dorsey", "Egorov", "Fischer", "Gromov",
    "Hughes", "Ivanova", "Jensen", "Kuznetsov", "Lindqvist", "Morozov",
    "Novak", "Orlova", "Petrov", "Quintero", "Romanov", "Smirnova", "Turner",
)
STREETS = (
    "Lenina St", "Oak Ave", "Maple Rd", "Nevsky Prospekt", "Park Lane",
    "Sadovaya St", "River Rd", "Mira Ave", "High St", "Garden Row",
)
CITIES = (
    "Moscow", "Kazan", "Novosibirsk", "Berlin", "Riga", "Tallinn",
    "Springfield", "Portland", "Lyon", "Porto",
)
EMAIL_DOMAINS = ("example.com", "example.org", "mail.example.net")

MIN_AGE_YEARS = 18
MAX_AGE_YEARS = 80


class RandomUserGenerator:
    """
    Builds random users and assigns each a non-empty random subset of the
    roles it is given.

    Every generated user gets the encoded default seed password.
    """

    def __init__(
        self,
        password_encoder: PasswordEncoder,
        rng: random.Random | None = None,
        default_password: str = DEFAULT_SEED_PASSWORD,
    ) -> None:
        self._encoder = password_encoder
        self._rng = rng or random.Random()
        self._default_password = default_password

    def generate(self, count: int, available_roles: Sequence[Role]) -> list[User]:
        users = [self._build_user(available_roles) for _ in range(max(count, 0))]
        _log.debug("random_users_generated", count=len(users), roles=len(available_roles))
        return users

    def _build_user(self, available_roles: Sequence[Role]) -> User:
        first = self._rng.choice(FIRST_NAMES)
        last = self._rng.choice(LAST_NAMES)
        username = f"{first}.{last}{self._rng.randint(10, 9999)}".lower()
        return User(
            username=username,
            password_hash=self._encoder.encode(self._default_password),
            email=f"{username}@{self._rng.choice(EMAIL_DOMAINS)}",
            full_name=f"{first} {last}",
            date_of_birth=self._random_birth_date(),
            address=(
                f"{self._rng.randint(1, 250)} {self._rng.choice(STREETS)}, "
                f"{self._rng.choice(CITIES)}"
            ),
            roles=self._pick_roles(available_roles),
        )

    def _random_birth_date(self) -> date:
        today = date.today()
        youngest = today - timedelta(days=365 * MIN_AGE_YEARS)
        span_days = 365 * (MAX_AGE_YEARS - MIN_AGE_YEARS)
        return youngest - timedelta(days=self._rng.randint(0, span_days))

    def _pick_roles(self, available_roles: Sequence[Role]) -> set[Role]:
        if not available_roles:
            return set()
        k = self._rng.randint(1, len(available_roles))
        return set(self._rng.sample(list(available_roles), k))
