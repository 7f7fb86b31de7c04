"""Deterministic (when seeded) generation of mock users."""

from __future__ import annotations

import logging
import random
from datetime import timedelta

from userlist.models.user import Plan, Role, User, utcnow

LOGGER = logging.getLogger(__name__)

FIRST_NAMES = (
    "ivan",
    "petr",
    "anna",
    "maria",
    "aleksei",
    "elena",
    "dmitrii",
    "olga",
    "sergei",
    "natalia",
    "andrei",
    "tatiana",
    "mikhail",
    "ekaterina",
    "vladimir",
    "svetlana",
    "nikolai",
    "iulia",
    "aleksandr",
    "irina",
)

LAST_NAMES = (
    "ivanov",
    "petrov",
    "sidorova",
    "kozlova",
    "smirnov",
    "kuznetsova",
    "popov",
    "vasileva",
    "sokolov",
    "novikova",
    "morozov",
    "fedorova",
    "volkov",
    "morozova",
    "alekseev",
    "lebedeva",
    "semenov",
    "egorova",
    "pavlov",
    "kozlova",
)

DOMAINS = ("gmail.com", "yahoo.com", "outlook.com", "company.com", "test.com")
PLANS: tuple[Plan | None, ...] = (Plan.FREE, Plan.PRO, Plan.ENTERPRISE, None)
CREATED_WITHIN = timedelta(days=2 * 365)


def generate_users(count: int = 100, *, seed: int | None = None) -> list[User]:
    """Build ``count`` users with ids ``"1"..str(count)``.

    Emails follow ``first.last<index>@domain`` so every address is unique even
    when names repeat. ``createdAt`` falls within the last two years.

    :param count: Number of users to create.
    :param seed: Seed for the private random generator; ``None`` draws from
        system entropy.
    :returns: Users ordered by id.
    """
    rng = random.Random(seed)
    now = utcnow()
    roles = list(Role)
    users: list[User] = []
    for index in range(1, count + 1):
        first = rng.choice(FIRST_NAMES)
        last = rng.choice(LAST_NAMES)
        domain = rng.choice(DOMAINS)
        users.append(
            User(
                id=str(index),
                email=f"{first}.{last}{index}@{domain}",
                role=rng.choice(roles),
                created_at=now - CREATED_WITHIN * rng.random(),
                plan=rng.choice(PLANS),
            )
        )
    LOGGER.debug("Generated %s mock users", len(users))
    return users
