"""Application factory wiring Flask extensions and blueprints."""

from __future__ import annotations

from flask import Flask

from userlist.core.config import BaseConfig, get_config
from userlist.core.logger import configure_logging, init_app as init_logging
from userlist.repositories.user import InMemoryUserRepository


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    repository: InMemoryUserRepository | None = None,
) -> Flask:
    """Build and configure the Flask application.

    :param config: Config object or import path; defaults to ``APP_ENV``.
    :param repository: Optional pre-populated user store (tests inject one).
    """

    app = Flask(__name__)

    app.config.from_object(get_config() if config is None else config)
    app.json.ensure_ascii = bool(app.config.get("JSON_AS_ASCII", False))
    app.json.sort_keys = bool(app.config.get("JSON_SORT_KEYS", False))

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    from userlist.core import extensions

    extensions.init_app(app, repository=repository)

    init_logging(app)

    from userlist.core import cors

    cors.init_app(app)

    from userlist.api import init_app as init_api

    init_api(app)

    from userlist.core import errors

    errors.init_app(app)

    from userlist.cli import init_app as init_cli

    init_cli(app)

    return app
