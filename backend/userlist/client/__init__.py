"""Client-side listing core: filter state, debounced search, URL sync, query cache."""

from .api import TransportError, UsersAPI
from .detail import DetailKind, DetailState, UserDetail
from .filters import DEFAULT_FILTERS, FilterState, FilterStore
from .query import QueryClient, QueryResult, UserQuery, UsersQuery
from .scheduling import AsyncioScheduler, Scheduler
from .url_sync import Location, MemoryRouter, URLSynchronizer, build_query, filters_from_query
from .view import UsersListing, ViewKind, ViewState

__all__ = [
    "AsyncioScheduler",
    "DEFAULT_FILTERS",
    "DetailKind",
    "DetailState",
    "FilterState",
    "FilterStore",
    "Location",
    "MemoryRouter",
    "QueryClient",
    "QueryResult",
    "Scheduler",
    "TransportError",
    "URLSynchronizer",
    "UserDetail",
    "UserQuery",
    "UsersAPI",
    "UsersListing",
    "UsersQuery",
    "ViewKind",
    "ViewState",
    "build_query",
    "filters_from_query",
]
