"""Unit tests for the filter reducer and store."""

from __future__ import annotations

import pytest

from userlist.client.filters import (
    DEFAULT_FILTERS,
    CommitDebouncedSearch,
    FilterState,
    FilterStore,
    SetCurrentPage,
    SetSearch,
    reduce_filters,
)
from userlist.services._shared.dto import QueryParams


class TestReduceFilters:
    def test_defaults(self):
        assert DEFAULT_FILTERS == FilterState(
            search="", debounced_search="", sort_by="email", desc=False, page_size=20, current_page=1
        )

    def test_search_resets_page(self):
        state = FilterState(current_page=4)

        assert reduce_filters(state, SetSearch("ivan")) == FilterState(search="ivan", current_page=1)

    def test_page_size_resets_page(self):
        store = FilterStore(FilterState(current_page=3))

        assert store.set_page_size(50) == FilterState(page_size=50, current_page=1)

    def test_sorting_keeps_page(self):
        store = FilterStore(FilterState(current_page=3))
        store.set_sort_by("createdAt")
        store.set_desc(True)

        assert store.state.current_page == 3
        assert store.state.sort_by == "createdAt"
        assert store.state.desc is True

    def test_page_is_at_least_one(self):
        assert reduce_filters(DEFAULT_FILTERS, SetCurrentPage(0)).current_page == 1

    @pytest.mark.parametrize("call, value", [("set_sort_by", "name"), ("set_page_size", 25)])
    def test_values_outside_options_are_rejected(self, call, value):
        store = FilterStore()

        with pytest.raises(ValueError):
            getattr(store, call)(value)
        assert store.state == DEFAULT_FILTERS

    def test_unknown_action_is_rejected(self):
        with pytest.raises(TypeError):
            reduce_filters(DEFAULT_FILTERS, object())

    def test_query_params_use_debounced_search(self):
        state = FilterState(search="iv", debounced_search="i", page_size=50, current_page=2, desc=True)

        assert state.query_params() == QueryParams(limit=50, search="i", sort_by="email", desc=True, page=2)

    def test_seeded_search_is_committed(self):
        assert FilterState.from_overrides({"search": "ivan"}).debounced_search == "ivan"


class TestFilterStore:
    def test_subscribers_get_previous_and_current(self):
        store = FilterStore()
        seen = []
        store.subscribe(lambda prev, cur: seen.append((prev.current_page, cur.current_page)))

        store.set_current_page(2)
        store.set_current_page(3)

        assert seen == [(1, 2), (2, 3)]

    def test_no_notification_without_change(self):
        store = FilterStore()
        seen = []
        store.subscribe(lambda prev, cur: seen.append(cur))

        store.set_sort_by("email")
        store.dispatch(CommitDebouncedSearch(""))

        assert seen == []

    def test_unsubscribe(self):
        store = FilterStore()
        seen = []
        unsubscribe = store.subscribe(lambda prev, cur: seen.append(cur))

        unsubscribe()
        unsubscribe()
        store.set_desc(True)

        assert seen == []

    def test_actions_apply_in_dispatch_order(self):
        store = FilterStore()
        store.set_current_page(5)
        store.set_search("x")
        store.set_current_page(2)

        assert store.state.current_page == 2
        assert store.state.search == "x"
