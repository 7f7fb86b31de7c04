"""HTTP client for the users API."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

import requests
from marshmallow import ValidationError as MarshmallowValidationError

from userlist.models.user import User
from userlist.schemas.user import UserSchema
from userlist.services._shared.dto import ListingResult, QueryParams

log = logging.getLogger(__name__)

T = TypeVar("T")

_user_schema = UserSchema()


class TransportError(Exception):
    """Network failure, non-2xx response or unreadable body.

    :param message: Summary including the HTTP method and path.
    :param status: HTTP status code, ``None`` when no response arrived.
    """

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


class UsersAPI:
    """Thin wrapper over ``/api/users`` returning domain objects.

    :param base_url: Server root, e.g. ``http://localhost:8000``.
    :param session: Optional :class:`requests.Session` (shared connections).
    :param timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        base_url: str,
        *,
        session: requests.Session | None = None,
        timeout: float = 10.0,
        prefix: str = "/api",
    ) -> None:
        self.base_url = base_url.rstrip("/") + prefix
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise TransportError(f"{method} {path} failed: {exc}") from exc
        if not response.ok:
            raise TransportError(
                f"{method} {path} failed with {response.status_code}: {_error_text(response)}",
                status=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(
                f"{method} {path} returned a non-JSON body ({response.headers.get('Content-Type')})",
                status=response.status_code,
            ) from exc

    def _load(self, method: str, path: str, loader: Callable[[Any], T], body: Any) -> T:
        """Map a decoded body, reporting an unexpected shape as a transport failure."""
        try:
            return loader(body)
        except (KeyError, TypeError, ValueError, MarshmallowValidationError) as exc:
            raise TransportError(f"{method} {path} returned an unexpected body: {exc!r}") from exc

    # ---------------------------- Listing ----------------------------

    def fetch_users(self, params: QueryParams) -> ListingResult:
        """``GET /users`` mapped to a :class:`ListingResult`."""
        data = self._request("GET", "/users", params=params.to_query())
        return self._load("GET", "/users", _listing_from_body, data)

    # ---------------------------- Single user ----------------------------

    def get_user(self, user_id: str) -> User:
        path = f"/users/{user_id}"
        return self._load("GET", path, _user_schema.load, self._request("GET", path))

    def refresh_user(self, user_id: str) -> dict[str, Any]:
        return self._request("POST", f"/users/{user_id}/refresh")

    def delete_user(self, user_id: str) -> dict[str, Any]:
        return self._request("DELETE", f"/users/{user_id}")


def _listing_from_body(body: dict[str, Any]) -> ListingResult:
    return ListingResult(
        users=tuple(_user_schema.load(item) for item in body["data"]),
        total=int(body["total"]),
        total_pages=int(body["totalPages"]),
        current_page=int(body["page"]),
    )


def _error_text(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.reason or "error"
    if isinstance(body, dict):
        return str(body.get("error") or body.get("detail") or response.reason)
    return response.reason or "error"
