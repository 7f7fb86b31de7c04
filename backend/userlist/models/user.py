"""User record held by the in-memory store."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class Role(str, Enum):
    """Access role shown in the listing (no authorization is attached)."""

    ADMIN = "admin"
    EDITOR = "editor"
    VIEWER = "viewer"


class Plan(str, Enum):
    """Subscription plan; a user may have none."""

    FREE = "free"
    PRO = "pro"
    ENTERPRISE = "enterprise"


@dataclass(frozen=True, slots=True)
class User:
    """
    Immutable user snapshot.

    The repository replaces whole instances on update, so consumers can hold
    on to a ``User`` without seeing it change underneath them.

    Fields
    ------
    id : str
        Stable identifier (numeric string).
    email : str
        Login email, used for search and the default sort.
    role : Role
        One of ``admin``, ``editor``, ``viewer``.
    created_at : datetime
        Timezone-aware creation instant, serialized as ISO 8601.
    plan : Plan | None
        Subscription plan, ``None`` when absent.
    """

    id: str
    email: str
    role: Role
    created_at: datetime
    plan: Plan | None = None

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    def with_changes(self, **changes: Any) -> "User":
        """Return a copy with ``changes`` applied."""
        return replace(self, **changes)


def utcnow() -> datetime:
    """Timezone-aware current instant (patched by freezegun in tests)."""
    return datetime.now(timezone.utc)
