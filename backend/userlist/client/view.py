"""Listing view model: wires the client stack together and derives what to show."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from userlist.client.actions import UsersActions, UsersHandlers
from userlist.client.api import TransportError, UsersAPI
from userlist.client.debounce import DebouncedSearch
from userlist.client.filters import FilterStore
from userlist.client.query import QueryClient, UsersQuery
from userlist.client.scheduling import Scheduler
from userlist.client.url_sync import Router, URLSynchronizer, filters_from_query
from userlist.core.config import ClientSettings
from userlist.models.user import User

log = logging.getLogger(__name__)


class ViewKind(str, Enum):
    LOADING = "loading"
    ERROR = "error"
    EMPTY = "empty"
    TABLE = "table"


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    SERVER_ERROR = "server_error"
    GENERIC = "generic"


class Recovery(str, Enum):
    CLEAR_SEARCH = "clear_search"
    RETRY = "retry"
    RESET_FILTERS = "reset_filters"
    BACK_TO_LIST = "back_to_list"


@dataclass(frozen=True, slots=True)
class Notice:
    """Message block shown instead of the table."""

    title: str
    message: str
    recovery: Recovery
    kind: ErrorKind | None = None


@dataclass(frozen=True, slots=True)
class ViewState:
    kind: ViewKind
    rows: Sequence[User] = ()
    notice: Notice | None = None
    current_page: int = 1
    total_pages: int = 0
    total: int = 0


EMPTY_NOTICE = Notice(
    title="Пользователи не найдены",
    message="Попробуйте изменить параметры поиска или фильтры",
    recovery=Recovery.RESET_FILTERS,
)


def classify_error(error: TransportError) -> Notice:
    """Pick the message and recovery action for a failed listing."""
    if error.status == 404:
        return Notice(
            title="Пользователи не найдены",
            message="Попробуйте изменить параметры поиска",
            recovery=Recovery.CLEAR_SEARCH,
            kind=ErrorKind.NOT_FOUND,
        )
    if error.status is not None and error.status >= 500:
        return Notice(
            title="Что-то пошло не так",
            message="Проблема на сервере, попробуйте позже",
            recovery=Recovery.RETRY,
            kind=ErrorKind.SERVER_ERROR,
        )
    return Notice(
        title="Ошибка загрузки",
        message="Не удалось загрузить данные",
        recovery=Recovery.RETRY,
        kind=ErrorKind.GENERIC,
    )


def can_edit(user: User) -> bool:
    """Row actions (refresh, delete) are disabled for admins."""
    return not user.is_admin


class UsersListing:
    """The users listing screen without the widgets.

    :meth:`mount` seeds the filters from the router's location and starts the
    debounce, URL sync and query; :meth:`unmount` tears them down so no timer
    fires afterwards.
    """

    def __init__(
        self,
        api: UsersAPI,
        router: Router,
        scheduler: Scheduler,
        *,
        settings: ClientSettings | None = None,
        client: QueryClient | None = None,
    ) -> None:
        self.settings = settings or ClientSettings()
        self.api = api
        self.router = router
        self.scheduler = scheduler
        self.client = client or QueryClient(
            scheduler,
            retry=self.settings.retry,
            retry_delay_ms=self.settings.retry_delay_ms,
            retry_delay_max_ms=self.settings.retry_delay_max_ms,
        )
        self.store: FilterStore | None = None
        self.query: UsersQuery | None = None
        self.actions: UsersActions | None = None
        self.handlers: UsersHandlers | None = None
        self._debounce: DebouncedSearch | None = None
        self._url_sync: URLSynchronizer | None = None

    @property
    def mounted(self) -> bool:
        return self.store is not None

    def mount(self) -> None:
        if self.mounted:
            return
        self.store = FilterStore(filters_from_query(self.router.location.query))
        self._debounce = DebouncedSearch(self.store, self.scheduler, delay_ms=self.settings.debounce_ms)
        self._url_sync = URLSynchronizer(self.store, self.router)
        self._url_sync.start()
        self.query = UsersQuery(self.client, self.store, self.api.fetch_users)
        self.query.start()
        self.actions = UsersActions(self.store, self.client, self.api, self.router)
        self.handlers = UsersHandlers(self.store)
        log.debug("listing.mounted %s", self.store.state)

    def unmount(self) -> None:
        if not self.mounted:
            return
        self._debounce.close()
        self._url_sync.close()
        self.query.stop()
        self.store = self.query = self.actions = self.handlers = None
        self._debounce = self._url_sync = None

    @property
    def settled(self) -> bool:
        """Mounted, with data or an error for the active key and nothing in flight."""
        if not self.mounted:
            return False
        result = self.query.result()
        return not result.is_loading and not result.is_fetching

    def focus(self) -> None:
        """Forward a window-focus event to the query cache."""
        self.client.on_focus()

    def view_state(self) -> ViewState:
        if not self.mounted:
            raise RuntimeError("Listing is not mounted")
        result = self.query.result()
        current_page = self.store.state.current_page
        if result.is_loading:
            return ViewState(kind=ViewKind.LOADING, current_page=current_page)
        if result.error is not None:
            return ViewState(
                kind=ViewKind.ERROR, notice=classify_error(result.error), current_page=current_page
            )
        data = result.data
        if not data.users:
            return ViewState(
                kind=ViewKind.EMPTY,
                notice=EMPTY_NOTICE,
                current_page=current_page,
                total_pages=data.total_pages,
                total=data.total,
            )
        return ViewState(
            kind=ViewKind.TABLE,
            rows=tuple(data.users),
            current_page=current_page,
            total_pages=data.total_pages,
            total=data.total,
        )
