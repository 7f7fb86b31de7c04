# comments in English; reST docstrings strict
"""Listing contracts shared by the query service, the API and the client."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import asdict, dataclass, field
from typing import Any, Final

from userlist.models.user import User

SORT_FIELDS: Final[tuple[str, ...]] = ("email", "createdAt", "role")
PAGE_SIZE_OPTIONS: Final[tuple[int, ...]] = (10, 20, 50)


@dataclass(frozen=True, slots=True)
class QueryParams:
    """
    The five values that fully determine one listing result.

    Instances are hashable and compare by value, so they double as cache
    keys.

    :param limit: Page size (> 0).
    :type limit: int
    :param search: Case-insensitive email substring; empty matches all.
    :type search: str
    :param sort_by: One of :data:`SORT_FIELDS`.
    :type sort_by: str
    :param desc: Reverse the comparator when ``True``.
    :type desc: bool
    :param page: 1-based page number.
    :type page: int
    """

    limit: int = 10
    search: str = ""
    sort_by: str = "email"
    desc: bool = False
    page: int = 1

    def to_query(self) -> dict[str, str]:
        """Render the store-facing ``GET /api/users`` query parameters."""
        return {
            "limit": str(self.limit),
            "search": self.search,
            "sortBy": self.sort_by,
            "desc": "true" if self.desc else "false",
            "page": str(self.page),
        }


@dataclass(frozen=True, slots=True)
class ListingResult:
    """
    One page of users plus the counts needed to paginate.

    :param users: Page slice, already filtered and sorted.
    :type users: Sequence[User]
    :param total: Number of users matching the filter before pagination.
    :type total: int
    :param total_pages: ``ceil(total / limit)``.
    :type total_pages: int
    :param current_page: Page this slice belongs to.
    :type current_page: int
    """

    users: Sequence[User] = field(default_factory=tuple)
    total: int = 0
    total_pages: int = 0
    current_page: int = 1

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def total_pages(total: int, limit: int) -> int:
    """Return ``ceil(total / limit)`` (0 when nothing matched)."""
    return math.ceil(total / limit) if limit > 0 else 0
