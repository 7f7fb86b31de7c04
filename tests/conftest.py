"""Global pytest fixtures for the users listing."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any, Callable

import pytest
from flask import Flask

from userlist import create_app
from userlist.core.config import TestingConfig
from userlist.repositories.user import InMemoryUserRepository
from userlist.seeds.seed_data import generate_users

from tests.helpers.scheduler import ManualScheduler

SEED = 1234


@pytest.fixture()
def repository() -> InMemoryUserRepository:
    """Fresh store with 100 reproducible users per test."""

    return InMemoryUserRepository(generate_users(100, seed=SEED))


@pytest.fixture()
def app(repository: InMemoryUserRepository) -> Generator[Flask, None, None]:
    """Create and configure a Flask application bound to ``repository``.

    Returns
    -------
    Generator[Flask, None, None]
        Configured Flask application instance.
    """

    application = create_app(TestingConfig, repository=repository)
    application.logger.setLevel("WARNING")
    with application.app_context():
        yield application


@pytest.fixture()
def client(app: Flask) -> Any:
    """Return a Flask test client."""

    return app.test_client()


@pytest.fixture()
def scheduler() -> ManualScheduler:
    """Virtual clock driving debounce, fetch and retry timers."""

    return ManualScheduler()


@pytest.fixture()
def freeze_time() -> Callable[[str | None], Any]:
    """Factory returning :func:`freezegun.freeze_time`.

    Examples
    --------
    >>> def test_with_frozen_time(freeze_time):
    ...     with freeze_time("2024-01-01"):
    ...         ...
    """

    from freezegun import freeze_time as _freeze_time

    def _factory(target: str | None = None) -> Any:
        return _freeze_time(target or "2024-01-01")

    return _factory
