"""User resource schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, post_load, validate

from userlist.models.user import Plan, Role, User
from userlist.services._shared.dto import SORT_FIELDS, QueryParams

ROLE_VALUES = [r.value for r in Role]
PLAN_VALUES = [p.value for p in Plan]


class UserSchema(Schema):
    """Public representation of a user entity.

    Dumps :class:`User` records for the API and loads them back on the
    client side.
    """

    class Meta:
        unknown = EXCLUDE

    id = fields.String(required=True)
    email = fields.String(required=True)
    role = fields.Function(lambda obj: obj.role.value, deserialize=Role, required=True)
    createdAt = fields.DateTime(attribute="created_at", required=True)
    plan = fields.Function(
        lambda obj: obj.plan.value if obj.plan else None,
        deserialize=lambda value: Plan(value) if value else None,
        allow_none=True,
    )

    @post_load
    def make_user(self, data, **_):
        return User(**data)


class UserCreateSchema(Schema):
    """Payload for ``POST /users``; emptiness is checked by the service."""

    class Meta:
        unknown = EXCLUDE

    email = fields.String(load_default=None, allow_none=True)


class UserUpdateSchema(Schema):
    """Partial update payload for ``PUT /users/<id>``."""

    class Meta:
        unknown = EXCLUDE

    email = fields.String(allow_none=True)
    role = fields.String(allow_none=True, validate=validate.OneOf(ROLE_VALUES))
    plan = fields.String(allow_none=True, validate=validate.OneOf(PLAN_VALUES))


class UserListQuerySchema(Schema):
    """Query parameters accepted by ``GET /users``.

    Defaults mirror the mock API: page 1, 10 per page, sorted by email
    ascending. ``desc`` is true only for the literal ``"true"``.
    """

    class Meta:
        unknown = EXCLUDE

    page = fields.Integer(load_default=1, validate=validate.Range(min=1))
    limit = fields.Integer(load_default=10, validate=validate.Range(min=1))
    search = fields.String(load_default="")
    sortBy = fields.String(
        load_default="email", attribute="sort_by", validate=validate.OneOf(SORT_FIELDS)
    )
    desc = fields.String(load_default="false")

    @post_load
    def to_params(self, data, **_):
        data["desc"] = data["desc"] == "true"
        return QueryParams(**data)
