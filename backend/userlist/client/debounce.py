"""Debounced projection of the raw search box into ``debounced_search``."""

from __future__ import annotations

import logging

from userlist.client.filters import CommitDebouncedSearch, FilterState, FilterStore
from userlist.client.scheduling import Scheduler, TimerHandle

log = logging.getLogger(__name__)

SEARCH_DEBOUNCE_MS = 300


class DebouncedSearch:
    """Commit ``search`` once it has been stable for the quiet period.

    Every edit cancels the pending timer before scheduling a new one, so a
    superseded value is never committed. :meth:`close` cancels the timer for
    good.
    """

    def __init__(
        self,
        store: FilterStore,
        scheduler: Scheduler,
        *,
        delay_ms: int = SEARCH_DEBOUNCE_MS,
    ) -> None:
        self._store = store
        self._scheduler = scheduler
        self.delay = delay_ms / 1000
        self._handle: TimerHandle | None = None
        self._closed = False
        self._unsubscribe = store.subscribe(self._on_change)

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def _on_change(self, previous: FilterState, current: FilterState) -> None:
        if previous.search != current.search:
            self._restart()

    def _restart(self) -> None:
        self._cancel()
        if not self._closed:
            self._handle = self._scheduler.call_later(self.delay, self._fire)

    def _fire(self) -> None:
        self._handle = None
        if self._closed:
            return
        value = self._store.state.search
        log.debug("search.commit %r", value)
        self._store.dispatch(CommitDebouncedSearch(value))

    def _cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def close(self) -> None:
        """Cancel any pending commit and stop listening."""
        self._closed = True
        self._cancel()
        self._unsubscribe()
