"""``userlist`` command group and ``browse``: render one listing page from a running API."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

import click

from userlist.client.api import UsersAPI
from userlist.client.scheduling import AsyncioScheduler
from userlist.client.url_sync import USERS_PATH, MemoryRouter
from userlist.client.view import UsersListing, ViewState, can_edit
from userlist.core.config import ClientSettings
from userlist.core.logger import configure_logging

LOGGER = logging.getLogger(__name__)

POLL_INTERVAL = 0.01


class Screen(Protocol):
    @property
    def settled(self) -> bool: ...

    def mount(self) -> None: ...

    def unmount(self) -> None: ...

    def view_state(self) -> Any: ...


def _echo_view(view: ViewState) -> None:
    """Pretty-print the listing outcome."""
    if view.notice is not None:
        click.echo(f"{view.notice.title}: {view.notice.message}")
        click.echo(f"  -> {view.notice.recovery.value}")
        return
    rows = view.rows
    width = max(len(u.email) for u in rows)
    for user in rows:
        plan = user.plan.value if user.plan else "-"
        flag = "" if can_edit(user) else "  (read-only)"
        click.echo(
            f"  {user.id:>4}  {user.email.ljust(width)}  {user.role.value:<6}  "
            f"{plan:<10}  {user.created_at:%Y-%m-%d}{flag}"
        )
    click.echo(f"Page {view.current_page}/{view.total_pages} ({view.total} users)")


async def _render(screen: Screen, timeout: float) -> Any:
    """Mount ``screen`` and wait until it settles on data or an error."""
    screen.mount()
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    try:
        while not screen.settled:
            if loop.time() >= deadline:
                raise click.ClickException("Timed out waiting for the users API")
            await asyncio.sleep(POLL_INTERVAL)
        return screen.view_state()
    finally:
        screen.unmount()


@click.group("userlist")
@click.option("--verbose", is_flag=True, help="Log client activity to stdout.")
def userlist_cli(verbose: bool) -> None:
    """Users listing tools."""
    configure_logging("DEBUG" if verbose else "WARNING")


@userlist_cli.command("browse")
@click.argument("query", required=False, default="")
@click.option("--api-url", envvar="USERS_API_URL", help="Users API root (default http://localhost:8000).")
@click.option("--timeout", type=float, default=60.0, show_default=True, help="Seconds to wait for a result.")
def browse_command(query: str, api_url: str | None, timeout: float) -> None:
    """Fetch the page selected by QUERY, e.g. ``search=ivan&sortBy=role&page=2``."""
    settings = ClientSettings.from_env()
    api = UsersAPI(api_url or settings.api_url, timeout=settings.timeout)
    router = MemoryRouter.at(f"{USERS_PATH}?{query.lstrip('?')}" if query else USERS_PATH)
    listing = UsersListing(api, router, AsyncioScheduler(), settings=settings)
    LOGGER.debug("browse %s", router.location.url)
    view = asyncio.run(_render(listing, timeout))
    _echo_view(view)
    if router.location.url != USERS_PATH:
        click.echo(f"URL: {router.location.url}")
