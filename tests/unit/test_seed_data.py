"""Unit tests for mock user generation."""

from __future__ import annotations

from datetime import timedelta

from userlist.models.user import utcnow
from userlist.seeds.seed_data import DOMAINS, generate_users


def test_ids_and_emails_are_unique() -> None:
    users = generate_users(100, seed=7)

    assert [u.id for u in users] == [str(i) for i in range(1, 101)]
    assert len({u.email for u in users}) == 100
    assert all(u.email.split("@")[1] in DOMAINS for u in users)


def test_same_seed_same_users() -> None:
    first = [(u.email, u.role, u.plan) for u in generate_users(20, seed=3)]
    second = [(u.email, u.role, u.plan) for u in generate_users(20, seed=3)]

    assert first == second


def test_created_within_two_years() -> None:
    users = generate_users(50, seed=1)
    now = utcnow()

    assert all(now - timedelta(days=731) <= u.created_at <= now for u in users)
