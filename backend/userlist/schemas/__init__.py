"""Marshmallow schemas for the users API and the listing URL state."""

from .filters import FilterQuerySchema, load_filter_overrides
from .user import UserCreateSchema, UserListQuerySchema, UserSchema, UserUpdateSchema

__all__ = [
    "FilterQuerySchema",
    "UserCreateSchema",
    "UserListQuerySchema",
    "UserSchema",
    "UserUpdateSchema",
    "load_filter_overrides",
]
