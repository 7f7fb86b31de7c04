"""Unit tests for listing mutations and control handlers."""

from __future__ import annotations

import logging

import pytest

from userlist.client.actions import UsersActions, UsersHandlers
from userlist.client.api import TransportError
from userlist.client.filters import FilterState, FilterStore
from userlist.client.query import QueryClient, UsersQuery
from userlist.client.url_sync import MemoryRouter
from userlist.services._shared.dto import ListingResult


class StubAPI:
    """Stand-in for :class:`UsersAPI` recording mutation calls."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[tuple[str, str]] = []

    def _call(self, name: str, user_id: str) -> dict:
        self.calls.append((name, user_id))
        if self.fail:
            raise TransportError(f"{name} failed with 500", status=500)
        return {"userId": user_id}

    def refresh_user(self, user_id: str) -> dict:
        return self._call("refresh", user_id)

    def delete_user(self, user_id: str) -> dict:
        return self._call("delete", user_id)


@pytest.fixture()
def store() -> FilterStore:
    return FilterStore(FilterState(search="ivan", debounced_search="ivan", sort_by="role", desc=True, page_size=50, current_page=3))


@pytest.fixture()
def fetches(scheduler, store):
    calls = []
    client = QueryClient(scheduler)
    query = UsersQuery(client, store, lambda params: calls.append(params) or ListingResult())
    query.start()
    scheduler.run_pending()
    return client, calls


def _actions(store, client, api, router=None):
    return UsersActions(store, client, api, router or MemoryRouter())


class TestUsersActions:
    @pytest.mark.parametrize("name", ["refresh_user", "delete_user"])
    def test_success_invalidates_listing(self, scheduler, store, fetches, name):
        client, calls = fetches
        api = StubAPI()

        getattr(_actions(store, client, api), name)("5")
        scheduler.run_pending()

        assert len(api.calls) == 1
        assert len(calls) == 2

    @pytest.mark.parametrize("name", ["refresh_user", "delete_user"])
    def test_failure_is_logged_and_swallowed(self, scheduler, store, fetches, name, caplog):
        client, calls = fetches

        with caplog.at_level(logging.ERROR, logger="userlist.client.actions"):
            getattr(_actions(store, client, StubAPI(fail=True)), name)("5")
        scheduler.run_pending()

        assert len(calls) == 1
        record = caplog.records[-1]
        assert record.user_id == "5"
        assert record.exc_info is not None

    def test_reload_invalidates(self, scheduler, store, fetches):
        client, calls = fetches

        _actions(store, client, StubAPI()).reload()
        scheduler.run_pending()

        assert len(calls) == 2

    def test_reset_filters_restores_defaults_and_location(self, scheduler, store, fetches):
        client, calls = fetches
        router = MemoryRouter.at("/users?search=ivan&sortBy=role&desc=true&limit=50&page=3")

        _actions(store, client, StubAPI(), router).reset_filters()
        scheduler.run_pending()

        state = store.state
        assert (state.search, state.sort_by, state.desc, state.page_size, state.current_page) == (
            "",
            "email",
            False,
            20,
            1,
        )
        assert router.replacements == [("/users", False)]
        assert calls[-1] == state.query_params()

    def test_debug_logs_json(self, store, fetches, caplog):
        client, _ = fetches

        with caplog.at_level(logging.INFO, logger="userlist.client.actions"):
            _actions(store, client, StubAPI()).debug(ListingResult(total=3))

        assert '"total": 3' in caplog.records[-1].getMessage()


class TestUsersHandlers:
    def test_controls_map_to_filter_changes(self):
        store = FilterStore()
        handlers = UsersHandlers(store)

        handlers.search("petr")
        handlers.sort_by("createdAt")
        handlers.sort_toggle()
        handlers.page_size("50")

        state = store.state
        assert state.search == "petr"
        assert state.sort_by == "createdAt"
        assert state.desc is True
        assert state.page_size == 50

    def test_sort_toggle_flips_back(self):
        store = FilterStore()
        handlers = UsersHandlers(store)

        handlers.sort_toggle()
        handlers.sort_toggle()

        assert store.state.desc is False

    def test_paging_is_clamped(self):
        store = FilterStore()
        handlers = UsersHandlers(store)

        handlers.previous_page()
        assert store.state.current_page == 1

        handlers.next_page(total_pages=2)
        handlers.next_page(total_pages=2)
        assert store.state.current_page == 2

        handlers.previous_page()
        assert store.state.current_page == 1

    def test_next_page_with_no_results_stays_on_first(self):
        store = FilterStore()

        UsersHandlers(store).next_page(total_pages=0)

        assert store.state.current_page == 1

    def test_clear_search(self):
        store = FilterStore(FilterState(search="x", current_page=2))

        UsersHandlers(store).clear_search()

        assert store.state.search == ""
        assert store.state.current_page == 1
