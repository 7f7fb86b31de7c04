"""Domain records."""

from .user import Plan, Role, User

__all__ = ["Plan", "Role", "User"]
