"""Filter state for the users listing and the reducer that evolves it.

State changes only through the closed set of action variants below; the
store applies them synchronously, in dispatch order, and tells subscribers
about every transition.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from typing import Any, Union

from userlist.services._shared.dto import PAGE_SIZE_OPTIONS, SORT_FIELDS, QueryParams

log = logging.getLogger(__name__)

DEFAULT_SORT_BY = "email"
DEFAULT_PAGE_SIZE = 20


@dataclass(frozen=True, slots=True)
class FilterState:
    """Current filter selections of the listing view.

    ``search`` is what the user typed; ``debounced_search`` trails it by the
    debounce quiet period and is what queries and the URL use.
    """

    search: str = ""
    debounced_search: str = ""
    sort_by: str = DEFAULT_SORT_BY
    desc: bool = False
    page_size: int = DEFAULT_PAGE_SIZE
    current_page: int = 1

    @classmethod
    def from_overrides(cls, overrides: Mapping[str, Any]) -> "FilterState":
        """Defaults with the given fields replaced.

        A seeded ``search`` is committed immediately: there is nothing to
        debounce on first render.
        """
        fields = dict(overrides)
        if "search" in fields:
            fields.setdefault("debounced_search", fields["search"])
        return cls(**fields)

    def query_params(self) -> QueryParams:
        """The filter tuple that selects one listing result."""
        return QueryParams(
            limit=self.page_size,
            search=self.debounced_search,
            sort_by=self.sort_by,
            desc=self.desc,
            page=self.current_page,
        )


DEFAULT_FILTERS = FilterState()


# --------------------------------------------------------------------------- #
# Actions
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class SetSearch:
    value: str


@dataclass(frozen=True, slots=True)
class SetSortBy:
    value: str


@dataclass(frozen=True, slots=True)
class SetDesc:
    value: bool


@dataclass(frozen=True, slots=True)
class SetPageSize:
    value: int


@dataclass(frozen=True, slots=True)
class SetCurrentPage:
    value: int


@dataclass(frozen=True, slots=True)
class CommitDebouncedSearch:
    """Dispatched by the debounce timer only."""

    value: str


FilterAction = Union[SetSearch, SetSortBy, SetDesc, SetPageSize, SetCurrentPage, CommitDebouncedSearch]


def reduce_filters(state: FilterState, action: FilterAction) -> FilterState:
    """Return the state after ``action``.

    A new search or page size starts over at page 1. Sorting keeps the
    current page, even if it is now out of range.

    :raises ValueError: For a sort field or page size outside the options.
    :raises TypeError: For an unknown action.
    """
    if isinstance(action, SetSearch):
        return replace(state, search=action.value, current_page=1)
    if isinstance(action, SetSortBy):
        if action.value not in SORT_FIELDS:
            raise ValueError(f"Unsupported sort field: {action.value!r}")
        return replace(state, sort_by=action.value)
    if isinstance(action, SetDesc):
        return replace(state, desc=bool(action.value))
    if isinstance(action, SetPageSize):
        if action.value not in PAGE_SIZE_OPTIONS:
            raise ValueError(f"Unsupported page size: {action.value!r}")
        return replace(state, page_size=action.value, current_page=1)
    if isinstance(action, SetCurrentPage):
        return replace(state, current_page=max(int(action.value), 1))
    if isinstance(action, CommitDebouncedSearch):
        return replace(state, debounced_search=action.value)
    raise TypeError(f"Unknown filter action: {action!r}")


Listener = Callable[[FilterState, FilterState], None]


class FilterStore:
    """Single source of truth for the listing filters.

    Subscribers receive ``(previous, current)`` after every transition that
    changed the state.
    """

    def __init__(self, initial: FilterState | None = None) -> None:
        self._state = initial or DEFAULT_FILTERS
        self._listeners: list[Listener] = []

    @property
    def state(self) -> FilterState:
        return self._state

    def dispatch(self, action: FilterAction) -> FilterState:
        previous = self._state
        current = reduce_filters(previous, action)
        if current == previous:
            return current
        self._state = current
        log.debug("filters.%s %s", type(action).__name__, current)
        for listener in list(self._listeners):
            listener(previous, current)
        return current

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; the returned callable unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # Named actions

    def set_search(self, value: str) -> FilterState:
        return self.dispatch(SetSearch(value))

    def set_sort_by(self, value: str) -> FilterState:
        return self.dispatch(SetSortBy(value))

    def set_desc(self, value: bool) -> FilterState:
        return self.dispatch(SetDesc(value))

    def set_page_size(self, value: int) -> FilterState:
        return self.dispatch(SetPageSize(value))

    def set_current_page(self, value: int) -> FilterState:
        return self.dispatch(SetCurrentPage(value))
