"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, jsonify, request

from userlist.core.extensions import get_user_repository
from userlist.services.user_service import UserService

F = TypeVar("F", bound=Callable[..., Any])


def get_user_service() -> UserService:
    """Return a :class:`UserService` bound to the app's repository."""

    return UserService(get_user_repository())


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def simulated_latency(func: F) -> F:
    """Sleep ``SIMULATED_LATENCY_MS`` before running the handler."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        delay_ms = int(current_app.config.get("SIMULATED_LATENCY_MS") or 0)
        if delay_ms > 0:
            time.sleep(delay_ms / 1000)
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
