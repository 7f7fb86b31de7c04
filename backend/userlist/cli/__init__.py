"""Command-line interface for the users listing."""

from __future__ import annotations

from flask import Flask

from .browse import userlist_cli
from . import show  # noqa: F401  registers ``userlist show``


def init_app(app: Flask) -> None:
    """Expose the ``userlist`` command group as ``flask userlist``."""
    app.cli.add_command(userlist_cli)


__all__ = ["init_app", "userlist_cli"]
