"""Assertion helper utilities for tests."""

from __future__ import annotations


def assert_json_keys(data: dict, required: set[str]) -> None:
    """Ensure that all required keys are present in ``data``.

    Raises
    ------
    AssertionError
        If any required key is missing.
    """

    missing = required - data.keys()
    assert not missing, f"Missing keys: {', '.join(sorted(missing))}"


def assert_listing(obj: dict) -> None:
    """Validate the ``GET /api/users`` response envelope."""

    assert_json_keys(obj, {"data", "total", "page", "limit", "totalPages"})
    assert isinstance(obj["data"], list)


def assert_problem(obj: dict, status: int) -> None:
    """Validate an ``application/problem+json`` body."""

    assert_json_keys(obj, {"type", "title", "status", "detail", "error", "request_id"})
    assert obj["status"] == status
    assert obj["error"] == obj["detail"]
