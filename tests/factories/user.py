"""Factory Boy definition for :class:`userlist.models.user.User`."""

from __future__ import annotations

from datetime import timezone

import factory

from userlist.models.user import Plan, Role, User


class UserFactory(factory.Factory):
    """
    Build immutable :class:`userlist.models.user.User` snapshots.

    Notes
    -----
    - Ids are numeric strings, like the ones the store hands out.
    - Nothing is persisted; pass the results to ``InMemoryUserRepository``.
    """

    class Meta:
        model = User

    id = factory.Sequence(lambda n: str(n + 1))
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    role = Role.VIEWER
    created_at = factory.Faker("date_time_between", start_date="-2y", end_date="now", tzinfo=timezone.utc)
    plan = factory.Iterator([Plan.FREE, Plan.PRO, Plan.ENTERPRISE, None])
