"""HTTP helper utilities for tests."""

from __future__ import annotations

import re
from urllib.parse import urlencode, urlsplit

import responses
from flask import Flask

API_ROOT = "http://users.test"


def json_headers() -> dict[str, str]:
    """Return standard JSON headers."""

    return {"Content-Type": "application/json", "Accept": "application/json"}


def build_url(path: str, **query: str | int | float) -> str:
    """Build a URL with encoded query parameters.

    Parameters
    ----------
    path:
        Base path of the endpoint.
    **query:
        Query parameters to append.

    Returns
    -------
    str
        Final URL string including encoded query string.
    """

    qs = urlencode({k: v for k, v in query.items() if v is not None})
    return f"{path}?{qs}" if qs else path


def route_to_app(mock: responses.RequestsMock, app: Flask, root: str = API_ROOT) -> None:
    """Serve every ``requests`` call under ``root`` from ``app``'s test client.

    Parameters
    ----------
    mock:
        Active :class:`responses.RequestsMock`.
    app:
        Application answering the requests.
    root:
        Scheme and host the client is pointed at.
    """

    test_client = app.test_client()

    def _callback(request):
        parts = urlsplit(request.url)
        response = test_client.open(
            parts.path,
            method=request.method,
            query_string=parts.query,
            data=request.body,
            headers={"Content-Type": request.headers.get("Content-Type", "application/json")},
        )
        return response.status_code, {"Content-Type": response.mimetype}, response.get_data()

    pattern = re.compile(re.escape(root) + r"/.*")
    for method in (responses.GET, responses.POST, responses.PUT, responses.DELETE):
        mock.add_callback(method, pattern, callback=_callback)
