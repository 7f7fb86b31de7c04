"""Health check endpoint."""

from __future__ import annotations

from flask import Blueprint, current_app

from userlist.api.deps import json_response, timing
from userlist.core.extensions import get_user_repository

bp = Blueprint("health", __name__)


@bp.get("/health")
@timing
def healthcheck():
    """Return application health and the size of the mock store."""

    payload = {
        "status": "ok",
        "users": get_user_repository().count(),
        "version": current_app.config.get("APP_VERSION", "dev"),
    }
    return json_response(payload)
