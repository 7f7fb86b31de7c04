"""Query cache and fetchers for the users screens.

The cache is keyed by ``(family, argument)``: ``("users", QueryParams)`` for
the listing and ``("user", id)`` for a single user. Invalidation is coarse:
every entry of a family is marked stale at once and every observer of that
family refetches its own key. Fetch attempts are scheduled on the client's
:class:`~userlist.client.scheduling.Scheduler` and the HTTP call itself runs
in the background, so the loop keeps serving timers while a request is in
flight. A completion is applied only if it belongs to the observer's latest
attempt for its current key.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Any, Protocol

from userlist.client.api import TransportError
from userlist.client.filters import FilterState, FilterStore
from userlist.client.scheduling import Scheduler, TimerHandle
from userlist.models.user import User
from userlist.services._shared.dto import ListingResult, QueryParams

log = logging.getLogger(__name__)

USERS_FAMILY = "users"
USER_FAMILY = "user"

QueryKey = tuple[str, Hashable]
Fetcher = Callable[[Any], Any]


@dataclass(slots=True)
class CacheEntry:
    """Last known outcome for one key."""

    data: Any = None
    error: TransportError | None = None
    stale: bool = True


@dataclass(frozen=True, slots=True)
class QueryResult:
    """What a consumer renders from.

    ``is_loading`` means there is nothing to show yet for the active key;
    ``is_fetching`` is true whenever a request or retry is outstanding, even
    with (stale) data on screen.
    """

    data: Any = None
    error: TransportError | None = None
    is_loading: bool = True
    is_fetching: bool = False


class QueryObserver(Protocol):
    family: str

    def refetch(self) -> None: ...


class QueryClient:
    """Cache shared by every query observer.

    :param scheduler: Runs fetches and retry backoffs.
    :param retry: Retries after the first failed attempt.
    :param retry_delay_ms: Backoff base; attempt ``n`` waits ``base * 2**n``.
    :param retry_delay_max_ms: Cap for a single backoff.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        *,
        retry: int = 3,
        retry_delay_ms: int = 1000,
        retry_delay_max_ms: int = 30_000,
    ) -> None:
        self.scheduler = scheduler
        self.retry = max(int(retry), 0)
        self.retry_delay_ms = retry_delay_ms
        self.retry_delay_max_ms = retry_delay_max_ms
        self._entries: dict[QueryKey, CacheEntry] = {}
        self._observers: list[QueryObserver] = []

    # ---------------------------- Cache ----------------------------

    def get(self, key: QueryKey) -> CacheEntry | None:
        return self._entries.get(key)

    def set_data(self, key: QueryKey, data: Any) -> None:
        self._entries[key] = CacheEntry(data=data, error=None, stale=False)

    def set_error(self, key: QueryKey, error: TransportError) -> None:
        entry = self._entries.setdefault(key, CacheEntry())
        entry.error = error
        entry.stale = True

    def clear_error(self, key: QueryKey) -> None:
        entry = self._entries.get(key)
        if entry is not None:
            entry.error = None

    def keys(self, family: str = USERS_FAMILY) -> list[QueryKey]:
        return [key for key in self._entries if key[0] == family]

    # ---------------------------- Invalidation ----------------------------

    def invalidate(self, family: str = USERS_FAMILY) -> None:
        """Mark every entry of ``family`` stale and refetch active observers."""
        for key in self.keys(family):
            self._entries[key].stale = True
        log.debug("query.invalidate family=%s", family)
        for observer in list(self._observers):
            if observer.family == family:
                observer.refetch()

    def on_focus(self) -> None:
        """The application regained focus: refetch every active query."""
        for observer in list(self._observers):
            observer.refetch()

    def retry_delay(self, attempt: int) -> float:
        """Seconds to wait before retry number ``attempt`` (0-based)."""
        return min(self.retry_delay_ms * (2**attempt), self.retry_delay_max_ms) / 1000

    # ---------------------------- Observers ----------------------------

    def attach(self, observer: QueryObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def detach(self, observer: QueryObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)


class Query:
    """Keep one cache key fetched, with retries and stale-response dropping.

    :param client: Shared cache and scheduler.
    :param key: ``(family, argument)``; ``fetcher`` receives the argument.
    :param fetcher: Blocking call returning the data or raising
        :class:`TransportError`.
    """

    family = ""

    def __init__(self, client: QueryClient, key: QueryKey, fetcher: Fetcher) -> None:
        self._client = client
        self._fetcher = fetcher
        self._key = key
        self._pending: TimerHandle | None = None
        self._token: object | None = None
        self._attempt = 0
        self._started = False
        self._listeners: list[Callable[[QueryResult], None]] = []

    @property
    def key(self) -> QueryKey:
        return self._key

    @property
    def active(self) -> bool:
        return self._started

    # ---------------------------- Lifecycle ----------------------------

    def start(self) -> None:
        """Attach to the client and fetch the current key."""
        if self._started:
            return
        self._started = True
        self._client.attach(self)
        self.refetch()

    def stop(self) -> None:
        """Detach; an in-flight response will be ignored."""
        self._started = False
        self._client.detach(self)
        self._cancel_pending()

    # ---------------------------- Results ----------------------------

    def result(self) -> QueryResult:
        entry = self._client.get(self._key)
        data = entry.data if entry else None
        error = entry.error if entry else None
        return QueryResult(
            data=data,
            error=error,
            is_loading=data is None and error is None,
            is_fetching=self._token is not None or self._pending is not None,
        )

    def subscribe(self, listener: Callable[[QueryResult], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        result = self.result()
        for listener in list(self._listeners):
            listener(result)

    # ---------------------------- Fetching ----------------------------

    def should_retry(self, error: TransportError) -> bool:
        return True

    def refetch(self) -> None:
        """Start over for the active key; a pending retry is dropped and an in-flight response ignored."""
        self._cancel_pending()
        self._attempt = 0
        self._client.clear_error(self._key)
        self._schedule(self._key, 0)
        self._notify()

    def _schedule(self, key: QueryKey, delay: float) -> None:
        self._pending = self._client.scheduler.call_later(delay, lambda: self._start(key))

    def _start(self, key: QueryKey) -> None:
        self._pending = None
        if key != self._key or not self.active:
            return
        token = self._token = object()
        self._client.scheduler.run_in_background(
            lambda: self._fetcher(key[1]),
            lambda data, error: self._finish(key, token, data, error),
        )

    def _finish(self, key: QueryKey, token: object, data: Any, error: BaseException | None) -> None:
        if token is not self._token or key != self._key or not self.active:
            log.debug("query.discard_stale", extra={"query_key": repr(key[1])})
            return
        self._token = None
        if error is None:
            self._client.set_data(key, data)
            self._attempt = 0
            self._notify()
            return
        if not isinstance(error, TransportError):
            log.error("query.crashed key=%r", key, exc_info=error)
            self._client.set_error(key, TransportError(f"{key[0]} query failed: {error!r}"))
            self._notify()
            return
        self._on_failure(key, error)

    def _on_failure(self, key: QueryKey, exc: TransportError) -> None:
        if self._attempt < self._client.retry and self.should_retry(exc):
            delay = self._client.retry_delay(self._attempt)
            self._attempt += 1
            log.warning(
                "query.retry in %.2fs: %s",
                delay,
                exc,
                extra={"attempt": self._attempt, "status": exc.status},
            )
            self._schedule(key, delay)
            return
        log.error("query.failed: %s", exc, extra={"attempt": self._attempt, "status": exc.status})
        self._client.set_error(key, exc)
        self._notify()

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        self._token = None


class UsersQuery(Query):
    """Keep the listing for the store's current :class:`QueryParams` fetched.

    A change of the filter tuple invalidates the whole ``users`` family and
    schedules a fetch for the new key.
    """

    family = USERS_FAMILY

    def __init__(
        self, client: QueryClient, store: FilterStore, fetcher: Callable[[QueryParams], ListingResult]
    ) -> None:
        super().__init__(client, (self.family, store.state.query_params()), fetcher)
        self._store = store
        self._unsubscribe: Callable[[], None] | None = None

    @property
    def params(self) -> QueryParams:
        return self._key[1]

    def start(self) -> None:
        """Attach to the client and the store, then fetch the first page."""
        if self.active:
            return
        self._unsubscribe = self._store.subscribe(self._on_filters)
        super().start()

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        super().stop()

    def _on_filters(self, previous: FilterState, current: FilterState) -> None:
        params = current.query_params()
        if params == self._key[1]:
            return
        self._key = (self.family, params)
        self._client.invalidate(self.family)


class UserQuery(Query):
    """Keep one user fetched by id. A 404 is final and not retried."""

    family = USER_FAMILY

    def __init__(self, client: QueryClient, user_id: str, fetcher: Callable[[str], User]) -> None:
        super().__init__(client, (self.family, str(user_id)), fetcher)

    def should_retry(self, error: TransportError) -> bool:
        return error.status != 404
