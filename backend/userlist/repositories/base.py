"""Sequence-level query utilities shared by in-memory repositories.

This module centralizes the list operations every listing needs:
- Case-insensitive substring filtering.
- Stable, direction-aware sorting through a whitelist of key functions.
- Page slicing that never fails on out-of-range pages.

Design decisions
----------------
* Helpers are pure: they never mutate the input sequence, so a repository can
  hand its own list in without copying first.
* Sorting relies on :func:`sorted` being stable. Descending order uses
  ``reverse=True``, which keeps equal elements in input order too.
* Unknown sort fields raise ``KeyError``; callers validate input at the edge.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

E = TypeVar("E")

SortKey = Callable[[Any], Any]


@dataclass(slots=True)
class Page(Generic[E]):
    """Result page with metadata.

    :param items: Listed entities in the current page.
    :type items: Sequence[E]
    :param total: Item count before slicing.
    :type total: int
    :param page: 1-based current page number.
    :type page: int
    :param limit: Page size.
    :type limit: int
    """

    items: Sequence[E]
    total: int
    page: int
    limit: int


def filter_contains(items: Iterable[E], needle: str, attr: Callable[[E], str]) -> list[E]:
    """Keep items whose ``attr`` contains ``needle`` ignoring case.

    :param items: Candidates, in order.
    :param needle: Substring to look for; empty keeps everything.
    :param attr: Accessor returning the text to search in.
    :returns: Matching items preserving input order.
    """
    if not needle:
        return list(items)
    folded = needle.casefold()
    return [item for item in items if folded in attr(item).casefold()]


def sort_items(
    items: Iterable[E],
    sortable_fields: Mapping[str, SortKey],
    field: str,
    *,
    desc: bool = False,
) -> list[E]:
    """Stable sort by a whitelisted field.

    :param items: Items to sort.
    :param sortable_fields: Public field name → key function.
    :param field: Public field name.
    :param desc: Descending when ``True``; ties keep input order either way.
    :returns: A new sorted list.
    :raises KeyError: When ``field`` is not whitelisted.
    """
    key = sortable_fields[field]
    return sorted(items, key=key, reverse=desc)


def paginate_sequence(items: Sequence[E], *, page: int, limit: int) -> Page[E]:
    """Slice ``items`` to ``[(page-1)*limit, page*limit)``.

    Out-of-range pages produce an empty slice, never an error.

    :param items: Fully filtered and sorted sequence.
    :param page: 1-based page number (clamped to ``>= 1``).
    :param limit: Page size (clamped to ``>= 1``).
    :returns: :class:`Page` with the slice and the unsliced total.
    """
    page = max(int(page), 1)
    limit = max(int(limit), 1)
    offset = (page - 1) * limit
    return Page(items=list(items[offset : offset + limit]), total=len(items), page=page, limit=limit)
