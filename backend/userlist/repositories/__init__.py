"""Repository layer."""

from .base import Page, filter_contains, paginate_sequence, sort_items
from .user import InMemoryUserRepository

__all__ = ["InMemoryUserRepository", "Page", "filter_contains", "paginate_sequence", "sort_items"]
