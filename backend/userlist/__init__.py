"""Expose the application factory at package level.

Provide convenient access to :func:`userlist.factory.create_app` so callers
can ``from userlist import create_app`` (``gunicorn 'userlist:create_app()'``).
"""

from __future__ import annotations

from .factory import create_app

__all__ = ["create_app"]
