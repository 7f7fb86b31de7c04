"""Unit tests for the listing query cache and fetcher."""

from __future__ import annotations

import logging

import pytest

from userlist.client.api import TransportError
from userlist.client.filters import FilterStore
from userlist.client.query import USER_FAMILY, USERS_FAMILY, QueryClient, UserQuery, UsersQuery
from userlist.services._shared.dto import ListingResult, QueryParams
from tests.factories.user import UserFactory


class FakeFetcher:
    """Records calls; fails the first ``failures`` of them."""

    def __init__(self, failures: int = 0, status: int | None = 500) -> None:
        self.calls: list[QueryParams] = []
        self.failures = failures
        self.status = status
        self.on_call = None

    def __call__(self, params: QueryParams) -> ListingResult:
        self.calls.append(params)
        if self.on_call is not None:
            self.on_call(params)
        if len(self.calls) <= self.failures:
            raise TransportError(f"GET /users failed with {self.status}", status=self.status)
        return ListingResult(total=len(self.calls), total_pages=1, current_page=params.page)


@pytest.fixture()
def client(scheduler) -> QueryClient:
    return QueryClient(scheduler)


@pytest.fixture()
def store() -> FilterStore:
    return FilterStore()


class TestUsersQuery:
    def test_start_fetches_current_params(self, scheduler, client, store):
        fetcher = FakeFetcher()
        query = UsersQuery(client, store, fetcher)

        query.start()
        assert query.result().is_loading
        assert query.result().is_fetching

        scheduler.run_pending()
        result = query.result()
        assert fetcher.calls == [store.state.query_params()]
        assert result.data.total == 1
        assert not result.is_loading
        assert not result.is_fetching

    def test_filter_change_fetches_new_key_and_marks_family_stale(self, scheduler, client, store):
        fetcher = FakeFetcher()
        query = UsersQuery(client, store, fetcher)
        query.start()
        scheduler.run_pending()
        first_key = query.key

        store.set_current_page(2)
        scheduler.run_pending()

        assert [p.page for p in fetcher.calls] == [1, 2]
        assert client.get(first_key).stale is True
        assert client.get(query.key).stale is False
        assert set(client.keys(USERS_FAMILY)) == {first_key, query.key}

    def test_unrelated_change_does_not_fetch(self, scheduler, client, store):
        fetcher = FakeFetcher()
        UsersQuery(client, store, fetcher).start()
        scheduler.run_pending()

        store.set_search("iv")
        scheduler.run_pending()

        assert len(fetcher.calls) == 1

    def test_response_completing_after_filter_change_is_dropped(self, scheduler, client, store):
        scheduler.hold_background = True
        fetcher = FakeFetcher()
        query = UsersQuery(client, store, fetcher)
        query.start()
        scheduler.run_pending()
        assert len(scheduler.jobs) == 1

        # Arrange: page 3 is requested while page 1 is still in flight
        store.set_current_page(3)
        scheduler.run_pending()
        assert len(scheduler.jobs) == 2

        # Act: page 1 completes first
        scheduler.finish_job()

        stale_key = (USERS_FAMILY, QueryParams(limit=20, page=1))
        assert client.get(stale_key) is None
        assert query.result().is_loading
        assert query.result().is_fetching

        scheduler.finish_job()
        assert query.result().data.current_page == 3
        assert not query.result().is_fetching
        assert [p.page for p in fetcher.calls] == [1, 3]

    def test_late_response_does_not_overwrite_newer_data(self, scheduler, client, store):
        scheduler.hold_background = True
        fetcher = FakeFetcher()
        query = UsersQuery(client, store, fetcher)
        query.start()
        scheduler.run_pending()
        store.set_current_page(2)
        scheduler.run_pending()

        scheduler.finish_job(1)
        scheduler.finish_job(0)

        assert query.result().data.current_page == 2
        assert client.get((USERS_FAMILY, QueryParams(limit=20, page=1))) is None

    def test_refetch_while_in_flight_ignores_the_first_response(self, scheduler, client, store):
        scheduler.hold_background = True
        fetcher = FakeFetcher()
        query = UsersQuery(client, store, fetcher)
        query.start()
        scheduler.run_pending()

        client.on_focus()
        scheduler.run_pending()
        scheduler.finish_job()
        assert query.result().is_loading

        scheduler.finish_job()
        assert query.result().data.total == 2

    def test_unexpected_exception_becomes_error_without_retry(self, scheduler, client, store, caplog):
        def broken(params):
            raise KeyError("data")

        query = UsersQuery(client, store, broken)

        with caplog.at_level(logging.ERROR, logger="userlist.client.query"):
            query.start()
            scheduler.advance(10)

        result = query.result()
        assert isinstance(result.error, TransportError)
        assert result.error.status is None
        assert not result.is_loading
        assert not result.is_fetching
        assert any(r.exc_info for r in caplog.records)

    def test_retries_with_exponential_backoff(self, scheduler, client, store, caplog):
        fetcher = FakeFetcher(failures=3)
        query = UsersQuery(client, store, fetcher)

        with caplog.at_level(logging.WARNING, logger="userlist.client.query"):
            query.start()
            scheduler.run_pending()
            assert len(fetcher.calls) == 1
            scheduler.advance(0.5)
            assert len(fetcher.calls) == 1
            scheduler.advance(0.5)
            assert len(fetcher.calls) == 2
            scheduler.advance(2)
            assert len(fetcher.calls) == 3
            scheduler.advance(4)

        assert len(fetcher.calls) == 4
        assert query.result().data is not None
        assert query.result().error is None
        assert [r.attempt for r in caplog.records if r.levelno == logging.WARNING] == [1, 2, 3]

    def test_error_after_retries_exhausted(self, scheduler, client, store):
        fetcher = FakeFetcher(failures=99, status=503)
        query = UsersQuery(client, store, fetcher)
        seen = []
        query.subscribe(seen.append)

        query.start()
        scheduler.advance(10)

        assert len(fetcher.calls) == 4
        result = query.result()
        assert result.error.status == 503
        assert not result.is_loading
        assert not result.is_fetching
        assert seen[-1].error is result.error

    def test_retry_delay_is_capped(self, scheduler):
        client = QueryClient(scheduler, retry_delay_ms=1000, retry_delay_max_ms=30_000)

        assert [client.retry_delay(n) for n in range(6)] == [1, 2, 4, 8, 16, 30]

    def test_invalidate_refetches_and_clears_error(self, scheduler, client, store):
        fetcher = FakeFetcher(failures=4)
        query = UsersQuery(client, store, fetcher)
        query.start()
        scheduler.advance(10)
        assert query.result().error is not None

        client.invalidate(USERS_FAMILY)
        assert query.result().is_loading

        scheduler.run_pending()
        assert query.result().error is None
        assert query.result().data is not None

    def test_invalidate_keeps_showing_stale_data(self, scheduler, client, store):
        fetcher = FakeFetcher()
        query = UsersQuery(client, store, fetcher)
        query.start()
        scheduler.run_pending()

        client.invalidate()

        result = query.result()
        assert result.data.total == 1
        assert result.is_fetching
        assert not result.is_loading

    def test_focus_refetches_active_queries(self, scheduler, client, store):
        fetcher = FakeFetcher()
        query = UsersQuery(client, store, fetcher)
        query.start()
        scheduler.run_pending()

        client.on_focus()
        scheduler.run_pending()

        assert len(fetcher.calls) == 2
        assert query.result().data.total == 2

    def test_stop_cancels_pending_work(self, scheduler, client, store):
        fetcher = FakeFetcher(failures=1)
        query = UsersQuery(client, store, fetcher)
        query.start()
        scheduler.run_pending()

        query.stop()
        scheduler.advance(10)
        store.set_current_page(2)
        client.on_focus()
        scheduler.advance(10)

        assert len(fetcher.calls) == 1
        assert not query.active


class TestUserQuery:
    def test_fetches_by_id(self, scheduler, client):
        calls = []

        def fetch(user_id):
            calls.append(user_id)
            return UserFactory(id=user_id)

        query = UserQuery(client, "7", fetch)
        query.start()
        scheduler.run_pending()

        assert calls == ["7"]
        assert query.key == (USER_FAMILY, "7")
        assert query.result().data.id == "7"

    def test_not_found_is_not_retried(self, scheduler, client):
        calls = []

        def fetch(user_id):
            calls.append(user_id)
            raise TransportError("GET /users/7 failed with 404", status=404)

        query = UserQuery(client, "7", fetch)
        query.start()
        scheduler.advance(10)

        assert calls == ["7"]
        assert query.result().error.status == 404

    def test_server_error_is_retried(self, scheduler, client):
        calls = []

        def fetch(user_id):
            calls.append(user_id)
            raise TransportError("GET /users/7 failed with 500", status=500)

        query = UserQuery(client, "7", fetch)
        query.start()
        scheduler.advance(10)

        assert len(calls) == 4

    def test_users_invalidation_leaves_detail_alone(self, scheduler, client):
        calls = []
        query = UserQuery(client, "7", lambda user_id: calls.append(user_id) or UserFactory(id=user_id))
        query.start()
        scheduler.run_pending()

        client.invalidate(USERS_FAMILY)
        scheduler.run_pending()

        assert calls == ["7"]
