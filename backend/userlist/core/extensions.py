"""Application-scoped collaborators and initialization helpers."""

from __future__ import annotations

import logging

from flask import Flask, current_app

from userlist.repositories.user import InMemoryUserRepository
from userlist.seeds.seed_data import generate_users

REPOSITORY_KEY = "user_repository"

log = logging.getLogger(__name__)


def init_app(app: Flask, repository: InMemoryUserRepository | None = None) -> None:
    """Attach the user repository to ``app.extensions``.

    Parameters
    ----------
    app: flask.Flask
        Application receiving the repository.
    repository: InMemoryUserRepository, optional
        Pre-built repository (tests inject their own). When omitted a store is
        generated from ``USERS_SEED_COUNT`` and ``USERS_SEED``.
    """
    if repository is None:
        count = int(app.config.get("USERS_SEED_COUNT") or 0)
        seed = app.config.get("USERS_SEED")
        repository = InMemoryUserRepository(generate_users(count, seed=seed))
        log.info("user_repository.seeded count=%s seed=%s", count, seed)
    app.extensions[REPOSITORY_KEY] = repository


def get_user_repository() -> InMemoryUserRepository:
    """Return the repository bound to the current application."""
    repository = current_app.extensions.get(REPOSITORY_KEY)
    if repository is None:
        raise RuntimeError("User repository is not initialized. Call init_app() first.")
    return repository
