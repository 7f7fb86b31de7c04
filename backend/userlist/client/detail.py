"""Single-user view model: one ``("user", id)`` query and what to show for it."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from userlist.client.api import TransportError, UsersAPI
from userlist.client.query import QueryClient, UserQuery
from userlist.client.scheduling import Scheduler
from userlist.client.url_sync import USERS_PATH
from userlist.client.view import ErrorKind, Notice, Recovery
from userlist.core.config import ClientSettings
from userlist.models.user import User

log = logging.getLogger(__name__)


class DetailKind(str, Enum):
    LOADING = "loading"
    ERROR = "error"
    USER = "user"


@dataclass(frozen=True, slots=True)
class DetailState:
    kind: DetailKind
    user: User | None = None
    notice: Notice | None = None


def classify_detail_error(error: TransportError) -> Notice:
    """Pick the message for a user that could not be loaded."""
    if error.status == 404:
        return Notice(
            title="Пользователь не найден",
            message="Вернитесь к списку пользователей",
            recovery=Recovery.BACK_TO_LIST,
            kind=ErrorKind.NOT_FOUND,
        )
    server = error.status is not None and error.status >= 500
    return Notice(
        title="Ошибка загрузки пользователя",
        message="Проблема на сервере, попробуйте позже" if server else "Не удалось загрузить данные",
        recovery=Recovery.RETRY,
        kind=ErrorKind.SERVER_ERROR if server else ErrorKind.GENERIC,
    )


class UserDetail:
    """The user details screen without the widgets.

    :param api: Client for ``/api/users``.
    :param user_id: Id taken from the ``/users/<id>`` route.
    :param scheduler: Runs the fetch and its retries.
    """

    back_path = USERS_PATH

    def __init__(
        self,
        api: UsersAPI,
        user_id: str,
        scheduler: Scheduler,
        *,
        settings: ClientSettings | None = None,
        client: QueryClient | None = None,
    ) -> None:
        self.settings = settings or ClientSettings()
        self.api = api
        self.user_id = str(user_id)
        self.client = client or QueryClient(
            scheduler,
            retry=self.settings.retry,
            retry_delay_ms=self.settings.retry_delay_ms,
            retry_delay_max_ms=self.settings.retry_delay_max_ms,
        )
        self.query: UserQuery | None = None

    @property
    def mounted(self) -> bool:
        return self.query is not None

    @property
    def settled(self) -> bool:
        if not self.mounted:
            return False
        result = self.query.result()
        return not result.is_loading and not result.is_fetching

    def mount(self) -> None:
        if self.mounted:
            return
        self.query = UserQuery(self.client, self.user_id, self.api.get_user)
        self.query.start()
        log.debug("detail.mounted user_id=%s", self.user_id)

    def unmount(self) -> None:
        if self.mounted:
            self.query.stop()
            self.query = None

    def focus(self) -> None:
        self.client.on_focus()

    def view_state(self) -> DetailState:
        if not self.mounted:
            raise RuntimeError("User detail is not mounted")
        result = self.query.result()
        if result.is_loading:
            return DetailState(kind=DetailKind.LOADING)
        if result.error is not None:
            return DetailState(kind=DetailKind.ERROR, notice=classify_detail_error(result.error))
        return DetailState(kind=DetailKind.USER, user=result.data)
