"""
Listing query service.

Pure function over a snapshot of users: filter by email substring, stable
sort, slice one page. The API layer and the tests call it directly; nothing
here touches Flask or the repository.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from userlist.models.user import User
from userlist.repositories.base import SortKey, filter_contains, paginate_sequence, sort_items
from userlist.services._shared.dto import ListingResult, QueryParams, total_pages

USER_SORT_KEYS: Mapping[str, SortKey] = {
    "email": lambda u: u.email,
    "createdAt": lambda u: u.created_at,
    "role": lambda u: u.role.value,
}


def list_users(
    users: Iterable[User],
    params: QueryParams,
    *,
    sort_keys: Mapping[str, SortKey] = USER_SORT_KEYS,
) -> ListingResult:
    """Return the page of ``users`` selected by ``params``.

    :param users: Full collection in store order.
    :param params: Filter tuple.
    :param sort_keys: Sortable fields; unknown ``sort_by`` falls back to email.
    :returns: Page slice with ``total`` counted before pagination.
    """
    matched = filter_contains(users, params.search, lambda u: u.email)
    field = params.sort_by if params.sort_by in sort_keys else "email"
    ordered = sort_items(matched, sort_keys, field, desc=params.desc)
    page = paginate_sequence(ordered, page=params.page, limit=params.limit)
    return ListingResult(
        users=tuple(page.items),
        total=page.total,
        total_pages=total_pages(page.total, page.limit),
        current_page=params.page,
    )
