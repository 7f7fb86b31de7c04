"""Two-way binding between the filter state and the location's query string.

Inbound runs once, at mount: recognized keys seed the filter store.
Outbound runs on every relevant change: default-valued keys are dropped,
other keys are written, and the location is replaced (no history entry, no
scroll) only when the query string actually changed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol
from urllib.parse import parse_qsl, urlencode, urlsplit

from userlist.client.filters import DEFAULT_FILTERS, FilterState, FilterStore
from userlist.schemas.filters import load_filter_overrides

log = logging.getLogger(__name__)

USERS_PATH = "/users"

# Outbound key -> (value getter, serializer); default values are omitted
_TRACKED: dict[str, tuple[Callable[[FilterState], object], Callable[[object], str]]] = {
    "search": (lambda s: s.debounced_search, str),
    "sortBy": (lambda s: s.sort_by, str),
    "desc": (lambda s: s.desc, lambda v: "true"),
    "limit": (lambda s: s.page_size, str),
    "page": (lambda s: s.current_page, str),
}


@dataclass(frozen=True, slots=True)
class Location:
    """Path plus raw (still encoded) query string."""

    path: str = USERS_PATH
    query: str = ""

    @classmethod
    def parse(cls, url: str) -> "Location":
        parts = urlsplit(url)
        return cls(path=parts.path or USERS_PATH, query=parts.query)

    @property
    def url(self) -> str:
        return f"{self.path}?{self.query}" if self.query else self.path


class Router(Protocol):
    """Navigation surface the synchronizer writes to."""

    @property
    def location(self) -> Location: ...

    def replace(self, url: str, *, scroll: bool = False) -> None: ...


@dataclass
class MemoryRouter:
    """In-process router; ``replacements`` records every ``replace`` call."""

    location: Location = field(default_factory=Location)
    replacements: list[tuple[str, bool]] = field(default_factory=list)

    @classmethod
    def at(cls, url: str) -> "MemoryRouter":
        return cls(location=Location.parse(url))

    def replace(self, url: str, *, scroll: bool = False) -> None:
        self.location = Location.parse(url)
        self.replacements.append((url, scroll))


def filters_from_query(query: str) -> FilterState:
    """Seed a :class:`FilterState` from a raw query string.

    Recognized keys are ``search``, ``sortBy``, ``desc``, ``limit`` and
    ``page``; a malformed value falls back to that field's default. When a
    key repeats the last occurrence wins.
    """
    params = dict(parse_qsl(query, keep_blank_values=True))
    return FilterState.from_overrides(load_filter_overrides(params))


def build_query(state: FilterState, current_query: str = "") -> str:
    """Serialize ``state`` on top of ``current_query``.

    Keys this module does not own are preserved in place; owned keys are set
    where they already appear (dropping duplicates), appended otherwise, and
    deleted when their value is the default.
    """
    pairs = parse_qsl(current_query, keep_blank_values=True)
    for key, (getter, serialize) in _TRACKED.items():
        value = getter(state)
        if value == getter(DEFAULT_FILTERS):
            pairs = [(k, v) for k, v in pairs if k != key]
            continue
        encoded = serialize(value)
        first = next((i for i, (k, _) in enumerate(pairs) if k == key), None)
        if first is None:
            pairs.append((key, encoded))
        else:
            pairs = [(k, v) for i, (k, v) in enumerate(pairs) if k != key or i == first]
            pairs[first] = (key, encoded)
    return urlencode(pairs)


def _tracked_changed(previous: FilterState, current: FilterState) -> bool:
    return any(getter(previous) != getter(current) for getter, _ in _TRACKED.values())


class URLSynchronizer:
    """Mirror the filter store into a :class:`Router` location."""

    def __init__(self, store: FilterStore, router: Router, *, path: str = USERS_PATH) -> None:
        self._store = store
        self._router = router
        self._path = path
        self._unsubscribe: Callable[[], None] | None = None

    def start(self) -> None:
        """Normalize the current location and follow later changes."""
        if self._unsubscribe is None:
            self._unsubscribe = self._store.subscribe(self._on_change)
        self.sync()

    def _on_change(self, previous: FilterState, current: FilterState) -> None:
        if _tracked_changed(previous, current):
            self.sync()

    def sync(self) -> bool:
        """Replace the location when the serialized state differs.

        :returns: ``True`` when the router was told to navigate.
        """
        current_query = self._router.location.query
        new_query = build_query(self._store.state, current_query)
        if new_query == current_query and self._router.location.path == self._path:
            return False
        url = f"{self._path}?{new_query}" if new_query else self._path
        log.debug("location.replace %s", url)
        self._router.replace(url, scroll=False)
        return True

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
