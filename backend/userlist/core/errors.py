"""Problem-details (RFC 7807) error responses for the users API.

Every error body is ``application/problem+json`` and additionally carries an
``error`` member with the human-readable message, which is what the listing
client surfaces::

    {"type": "about:blank", "title": "Not Found", "status": 404,
     "detail": "Пользователь не найден", "error": "Пользователь не найден",
     "code": "not_found", "instance": "/api/users/999", "request_id": "..."}
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from werkzeug.exceptions import HTTPException

from userlist.core.logger import ensure_request_id

log = logging.getLogger(__name__)

PROBLEM_MIMETYPE = "application/problem+json"

STATUS_CODES = {
    400: "bad_request",
    404: "not_found",
    405: "method_not_allowed",
    415: "unsupported_media_type",
    500: "internal_server_error",
}


def problem(
    status: int,
    message: str,
    *,
    code: str | None = None,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Build a problem-details body for the current request.

    :param status: HTTP status code.
    :param message: Client-safe summary, copied to ``detail`` and ``error``.
    :param code: Stable machine-readable code; derived from ``status`` if omitted.
    :param details: Optional structured context (validation messages, field).
    :returns: JSON-ready dictionary.
    """
    body: dict[str, Any] = {
        "type": "about:blank",
        "title": HTTPStatus(status).phrase,
        "status": int(status),
        "detail": message,
        "error": message,
        "code": code or STATUS_CODES.get(status, "error"),
        "instance": request.path if request else None,
        "request_id": ensure_request_id(),
    }
    if details:
        body["details"] = details
    return body


def problem_response(body: dict[str, Any]) -> tuple[Response, int]:
    response = jsonify(body)
    response.mimetype = PROBLEM_MIMETYPE
    return response, body["status"]


class APIError(Exception):
    """
    Error raised by services and views, rendered as a problem response.

    Parameters
    ----------
    message : str
        Client-facing description (may be localized).
    status_code : int, optional
        HTTP status. Defaults to ``400``.
    code : str, optional
        Machine-readable identifier. Defaults to ``"bad_request"``.
    details : dict[str, Any] | None, optional
        Structured context included as ``details``.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        code: str = "bad_request",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.code = code
        self.details = details or {}

    def to_problem(self) -> dict[str, Any]:
        return problem(self.status_code, self.message, code=self.code, details=self.details)


class NotFound(APIError):
    """404 for an unknown user id."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, status_code=HTTPStatus.NOT_FOUND, code="not_found")


class BadRequest(APIError):
    """400 when a required field is missing or malformed."""

    def __init__(self, message: str = "Bad request", details: dict[str, Any] | None = None) -> None:
        super().__init__(message, status_code=HTTPStatus.BAD_REQUEST, code="validation_error", details=details)


def _log_problem(kind: str, body: dict[str, Any]) -> None:
    level = logging.ERROR if body["status"] >= 500 else logging.WARNING
    log.log(level, "%s: code=%s status=%s detail=%s", kind, body["code"], body["status"], body["detail"])


def handle_api_error(err: APIError):
    body = err.to_problem()
    _log_problem("APIError", body)
    return problem_response(body)


def handle_http_exception(err: HTTPException):
    status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
    if status == HTTPStatus.NOT_FOUND:
        message = f"Route '{request.path}' not found"
    else:
        message = (err.description or HTTPStatus(status).phrase).strip()
    body = problem(status, message)
    _log_problem("HTTPException", body)
    return problem_response(body)


def handle_validation_error(err: MarshmallowValidationError):
    # Malformed query or body is a 400 here, not a 422
    body = problem(
        HTTPStatus.BAD_REQUEST,
        "Validation failed",
        code="validation_error",
        details={"errors": err.messages},
    )
    _log_problem("ValidationError", body)
    return problem_response(body)


def handle_unexpected_error(err: Exception):
    body = problem(HTTPStatus.INTERNAL_SERVER_ERROR, "Unexpected error")
    log.error("Unhandled exception: request_id=%s", body["request_id"], exc_info=err)
    return problem_response(body)


def init_app(app: Flask) -> None:
    """Register the problem-details handlers on ``app``."""
    app.register_error_handler(APIError, handle_api_error)
    app.register_error_handler(HTTPException, handle_http_exception)
    app.register_error_handler(MarshmallowValidationError, handle_validation_error)
    app.register_error_handler(Exception, handle_unexpected_error)
