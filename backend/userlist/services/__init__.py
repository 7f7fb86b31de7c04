"""Service layer public API.

Re-exports
----------
- Base primitives (from ``userlist.services._shared.base``)
    * :class:`BaseService`

- Listing contracts (from ``userlist.services._shared.dto``)
    * :class:`QueryParams`
    * :class:`ListingResult`

- Domain errors (from ``userlist.services._shared.errors``)
    * :class:`ServiceError`, :class:`NotFoundError`, :class:`ValidationError`

The listing function and :class:`UserService` are imported from their own
modules to keep the repository → service import graph acyclic.
"""

from __future__ import annotations

from ._shared.base import BaseService
from ._shared.dto import PAGE_SIZE_OPTIONS, SORT_FIELDS, ListingResult, QueryParams
from ._shared.errors import NotFoundError, ServiceError, ValidationError

__all__ = [
    "BaseService",
    "QueryParams",
    "ListingResult",
    "SORT_FIELDS",
    "PAGE_SIZE_OPTIONS",
    "ServiceError",
    "NotFoundError",
    "ValidationError",
]
