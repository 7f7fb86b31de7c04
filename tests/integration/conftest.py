"""Fixtures routing ``requests`` traffic into the Flask test app."""

from __future__ import annotations

import logging
from collections.abc import Generator

import pytest
import responses
from click.testing import CliRunner
from flask import Flask

from tests.helpers.http import route_to_app


@pytest.fixture()
def api_mock(app: Flask) -> Generator[responses.RequestsMock, None, None]:
    """Serve ``http://users.test/api/...`` from ``app``."""

    with responses.RequestsMock(assert_all_requests_are_fired=False) as mock:
        route_to_app(mock, app)
        yield mock


@pytest.fixture()
def runner() -> Generator[CliRunner, None, None]:
    """CLI runner that drops the handlers the command installs on the root logger."""

    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield CliRunner()
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)
