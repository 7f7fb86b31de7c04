"""User domain services."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from userlist.models.user import User, utcnow
from userlist.repositories.user import InMemoryUserRepository
from userlist.services._shared.base import BaseService
from userlist.services._shared.dto import ListingResult, QueryParams
from userlist.services._shared.errors import ServiceError, ValidationError
from userlist.services.listing import list_users

log = logging.getLogger(__name__)

USER_NOT_FOUND = "Пользователь не найден"
EMAIL_REQUIRED = "Email обязателен"
USER_DELETED = "Пользователь удален"
USER_REFRESHED = "Данные пользователя обновлены"


class UserService(BaseService):
    """Coordinate user-centric use cases over an injected repository."""

    not_found_message = USER_NOT_FOUND

    def __init__(self, repo: InMemoryUserRepository) -> None:
        self.repo = repo

    def list_users(self, params: QueryParams) -> ListingResult:
        """Return one listing page over the store's current contents."""

        return list_users(self.repo.all(), params)

    def get_user(self, user_id: str) -> User:
        try:
            return self.repo.get(user_id)
        except ServiceError as exc:
            raise self.translate_exceptions(exc) from exc

    def update_user(self, user_id: str, changes: Mapping[str, Any]) -> User:
        """Apply a partial ``{email?, role?, plan?}`` update."""

        try:
            return self.repo.update(user_id, changes)
        except ServiceError as exc:
            raise self.translate_exceptions(exc) from exc

    def delete_user(self, user_id: str) -> dict[str, Any]:
        """Remove a user, returning the confirmation message and the record."""

        try:
            removed = self.repo.delete(user_id)
        except ServiceError as exc:
            raise self.translate_exceptions(exc) from exc
        return {"message": USER_DELETED, "user": removed}

    def create_user(self, data: Mapping[str, Any]) -> User:
        """Create a new user from ``{email}``.

        :raises APIError: 400 when ``email`` is missing or blank.
        """

        email = (data.get("email") or "").strip()
        try:
            if not email:
                raise ValidationError(EMAIL_REQUIRED, field="email")
            return self.repo.create(email)
        except ServiceError as exc:
            raise self.translate_exceptions(exc) from exc

    def refresh_user(self, user_id: str) -> dict[str, Any]:
        """Touch a user server-side.

        Unknown ids are not an error: the endpoint only acknowledges the
        request, mirroring an upstream re-sync that may be eventually
        consistent.
        """

        if not self.repo.touch(user_id):
            log.warning("user.refresh_unknown", extra={"user_id": user_id})
        return {
            "message": USER_REFRESHED,
            "userId": user_id,
            "timestamp": utcnow().isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        }
