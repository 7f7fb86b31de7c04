"""User endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from userlist.api.deps import get_user_service, json_response, simulated_latency, timing
from userlist.schemas import UserCreateSchema, UserListQuerySchema, UserSchema, UserUpdateSchema

bp = Blueprint("users", __name__)

user_schema = UserSchema()
user_list_schema = UserSchema(many=True)
user_create_schema = UserCreateSchema()
user_update_schema = UserUpdateSchema()
user_list_query_schema = UserListQuerySchema()


@bp.get("")
@timing
@simulated_latency
def list_users():
    """Return one filtered, sorted page of users."""

    params = user_list_query_schema.load(request.args)
    result = get_user_service().list_users(params)
    return json_response(
        {
            "data": user_list_schema.dump(result.users),
            "total": result.total,
            "page": params.page,
            "limit": params.limit,
            "totalPages": result.total_pages,
        }
    )


@bp.post("")
@timing
@simulated_latency
def create_user():
    """Create a new ``viewer`` from ``{email}``."""

    payload = user_create_schema.load(request.get_json(silent=True) or {})
    user = get_user_service().create_user(payload)
    return json_response(user_schema.dump(user), status=201)


@bp.get("/<user_id>")
@timing
@simulated_latency
def get_user(user_id: str):
    """Return a single user or 404."""

    return json_response(user_schema.dump(get_user_service().get_user(user_id)))


@bp.put("/<user_id>")
@timing
@simulated_latency
def update_user(user_id: str):
    """Partially update ``email``, ``role`` and ``plan``."""

    changes = user_update_schema.load(request.get_json(silent=True) or {})
    user = get_user_service().update_user(user_id, changes)
    return json_response(user_schema.dump(user))


@bp.delete("/<user_id>")
@timing
@simulated_latency
def delete_user(user_id: str):
    """Delete a user and echo the removed record."""

    outcome = get_user_service().delete_user(user_id)
    return json_response({"message": outcome["message"], "user": user_schema.dump(outcome["user"])})


@bp.post("/<user_id>/refresh")
@timing
@simulated_latency
def refresh_user(user_id: str):
    """Acknowledge a server-side refresh of ``user_id``."""

    return json_response(get_user_service().refresh_user(user_id))
