"""In-memory user repository."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping
from typing import Any

from userlist.models.user import Plan, Role, User, utcnow
from userlist.services._shared.errors import NotFoundError

log = logging.getLogger(__name__)

_MISSING = object()


class InMemoryUserRepository:
    """Ordered collection of users owned by one application instance.

    The repository is the single owner of :class:`User` records; it hands out
    immutable snapshots and replaces entries on update. A lock serializes
    writers because the development server may run threaded.
    """

    entity = "User"

    def __init__(self, users: Iterable[User] = ()) -> None:
        self._users: list[User] = list(users)
        self._lock = threading.Lock()

    # ---------------------------- Whitelists ----------------------------

    def _updatable_fields(self):
        return {"email", "role", "plan"}

    # ---------------------------- Reads ----------------------------

    def all(self) -> list[User]:
        """Return a snapshot of every user in insertion order."""
        with self._lock:
            return list(self._users)

    def count(self) -> int:
        with self._lock:
            return len(self._users)

    def get(self, user_id: str) -> User:
        """Fetch one user.

        :raises NotFoundError: When ``user_id`` is unknown.
        """
        with self._lock:
            return self._users[self._index_of(user_id)]

    # ---------------------------- Writes ----------------------------

    def create(self, email: str) -> User:
        """Append a new ``viewer`` without a plan and return it."""
        with self._lock:
            user = User(
                id=self._next_id(),
                email=email,
                role=Role.VIEWER,
                created_at=utcnow(),
                plan=None,
            )
            self._users.append(user)
        log.info("user.created", extra={"user_id": user.id})
        return user

    def update(self, user_id: str, changes: Mapping[str, Any]) -> User:
        """Apply a partial update.

        ``email`` and ``role`` are replaced only by truthy values; ``plan`` is
        replaced whenever the key is present, so an explicit ``None`` clears
        it.

        :raises NotFoundError: When ``user_id`` is unknown.
        """
        allowed = {k: v for k, v in changes.items() if k in self._updatable_fields()}
        with self._lock:
            index = self._index_of(user_id)
            current = self._users[index]
            email = allowed.get("email") or current.email
            role = allowed.get("role") or current.role
            plan = allowed.get("plan", _MISSING)
            updated = current.with_changes(
                email=email,
                role=Role(role),
                plan=current.plan if plan is _MISSING else (Plan(plan) if plan else None),
            )
            self._users[index] = updated
        log.info("user.updated", extra={"user_id": user_id})
        return updated

    def delete(self, user_id: str) -> User:
        """Remove a user and return the removed record.

        :raises NotFoundError: When ``user_id`` is unknown.
        """
        with self._lock:
            removed = self._users.pop(self._index_of(user_id))
        log.info("user.deleted", extra={"user_id": user_id})
        return removed

    def touch(self, user_id: str) -> bool:
        """Server-side refresh hook; returns whether the user exists.

        Nothing about the record changes: the mock store has no upstream
        source to re-read from.
        """
        with self._lock:
            exists = any(u.id == user_id for u in self._users)
        log.info("user.touched exists=%s", exists, extra={"user_id": user_id})
        return exists

    # ---------------------------- Internals ----------------------------

    def _index_of(self, user_id: str) -> int:
        for index, user in enumerate(self._users):
            if user.id == user_id:
                return index
        raise NotFoundError(self.entity, user_id)

    def _next_id(self) -> str:
        # Ids stay unique after deletes, unlike len() + 1
        numeric = [int(u.id) for u in self._users if u.id.isdigit()]
        return str(max(numeric, default=0) + 1)
