"""``userlist show``: print one user from a running API."""

from __future__ import annotations

import asyncio

import click

from userlist.client.api import UsersAPI
from userlist.client.detail import DetailState, UserDetail
from userlist.client.scheduling import AsyncioScheduler
from userlist.core.config import ClientSettings

from .browse import LOGGER, _render, userlist_cli


def _echo_detail(view: DetailState) -> None:
    if view.notice is not None:
        click.echo(f"{view.notice.title}: {view.notice.message}")
        click.echo(f"  -> {view.notice.recovery.value}")
        return
    user = view.user
    click.echo(f"ID:         {user.id}")
    click.echo(f"Email:      {user.email}")
    click.echo(f"Role:       {user.role.value}")
    click.echo(f"Plan:       {user.plan.value if user.plan else 'No plan'}")
    click.echo(f"Created at: {user.created_at:%Y-%m-%d %H:%M:%S}")


@userlist_cli.command("show")
@click.argument("user_id")
@click.option("--api-url", envvar="USERS_API_URL", help="Users API root (default http://localhost:8000).")
@click.option("--timeout", type=float, default=60.0, show_default=True, help="Seconds to wait for a result.")
def show_command(user_id: str, api_url: str | None, timeout: float) -> None:
    """Fetch the user with id USER_ID."""
    settings = ClientSettings.from_env()
    api = UsersAPI(api_url or settings.api_url, timeout=settings.timeout)
    detail = UserDetail(api, user_id, AsyncioScheduler(), settings=settings)
    LOGGER.debug("show %s", user_id)
    _echo_detail(asyncio.run(_render(detail, timeout)))
