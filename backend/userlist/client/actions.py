"""User-triggered operations on the listing: mutations and filter handlers."""

from __future__ import annotations

import json
import logging

from userlist.client.api import TransportError, UsersAPI
from userlist.client.filters import DEFAULT_FILTERS, FilterStore
from userlist.client.query import USERS_FAMILY, QueryClient
from userlist.client.url_sync import USERS_PATH, Router
from userlist.services._shared.dto import ListingResult

log = logging.getLogger(__name__)


class UsersActions:
    """Mutations and cache-level commands.

    ``refresh_user`` and ``delete_user`` are fire-and-forget: success
    invalidates the ``users`` family, failure is logged and otherwise
    ignored (no retry, no rollback, no error state).
    """

    def __init__(
        self,
        store: FilterStore,
        client: QueryClient,
        api: UsersAPI,
        router: Router,
        *,
        path: str = USERS_PATH,
    ) -> None:
        self._store = store
        self._client = client
        self._api = api
        self._router = router
        self._path = path

    def reload(self) -> None:
        self._client.invalidate(USERS_FAMILY)

    def debug(self, data: ListingResult | None) -> None:
        """Log the listing data as JSON."""
        payload = data.to_dict() if data is not None else None
        log.info(json.dumps(payload, default=str, ensure_ascii=False))

    def reset_filters(self) -> None:
        """Back to the default filters and the bare listing URL."""
        self._store.set_search(DEFAULT_FILTERS.search)
        self._store.set_current_page(DEFAULT_FILTERS.current_page)
        self._store.set_sort_by(DEFAULT_FILTERS.sort_by)
        self._store.set_desc(DEFAULT_FILTERS.desc)
        self._store.set_page_size(DEFAULT_FILTERS.page_size)
        self._client.invalidate(USERS_FAMILY)
        self._router.replace(self._path, scroll=False)

    def refresh_user(self, user_id: str) -> None:
        try:
            self._api.refresh_user(user_id)
        except TransportError:
            log.exception("Failed to refresh user", extra={"user_id": user_id})
            return
        self._client.invalidate(USERS_FAMILY)

    def delete_user(self, user_id: str) -> None:
        try:
            self._api.delete_user(user_id)
        except TransportError:
            log.exception("Failed to delete user", extra={"user_id": user_id})
            return
        self._client.invalidate(USERS_FAMILY)


class UsersHandlers:
    """Translate raw control input into filter actions."""

    def __init__(self, store: FilterStore) -> None:
        self._store = store

    def search(self, value: str) -> None:
        self._store.set_search(value)

    def sort_by(self, value: str) -> None:
        self._store.set_sort_by(value)

    def page_size(self, value: str | int) -> None:
        self._store.set_page_size(int(value))

    def sort_toggle(self) -> None:
        self._store.set_desc(not self._store.state.desc)

    def previous_page(self) -> None:
        self._store.set_current_page(max(self._store.state.current_page - 1, 1))

    def next_page(self, total_pages: int) -> None:
        # The store clamps to 1, so an empty result stays on page 1
        self._store.set_current_page(min(self._store.state.current_page + 1, total_pages))

    def clear_search(self) -> None:
        self._store.set_search("")
