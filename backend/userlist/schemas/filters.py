"""URL query parameters for the listing view's filter state."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from marshmallow import EXCLUDE, Schema, ValidationError, fields, validate

from userlist.services._shared.dto import PAGE_SIZE_OPTIONS, SORT_FIELDS


class FilterQuerySchema(Schema):
    """Recognized location keys and the ``FilterState`` fields they seed.

    Every field is optional and validated on its own: a malformed value only
    drops that field (see :func:`load_filter_overrides`).
    """

    class Meta:
        unknown = EXCLUDE

    search = fields.String()
    sortBy = fields.String(attribute="sort_by", validate=validate.OneOf(SORT_FIELDS))
    desc = fields.Boolean(truthy={"true"}, falsy={"false"})
    limit = fields.Integer(attribute="page_size", strict=False, validate=validate.OneOf(PAGE_SIZE_OPTIONS))
    page = fields.Integer(attribute="current_page", strict=False, validate=validate.Range(min=1))


_schema = FilterQuerySchema()


def load_filter_overrides(params: Mapping[str, Any]) -> dict[str, Any]:
    """Return the well-typed ``FilterState`` overrides present in ``params``.

    Unrecognized keys are ignored and invalid values are discarded
    field-by-field so the caller falls back to the default for each of them.
    """
    try:
        return _schema.load(params)
    except ValidationError as err:
        valid = err.valid_data
        return dict(valid) if isinstance(valid, Mapping) else {}
