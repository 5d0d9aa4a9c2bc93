"""Schemas and fields shared by the request and response schemas."""

from __future__ import annotations

from datetime import datetime, timezone

from marshmallow import EXCLUDE, Schema, fields, validate

from gold_ledger.models.base import MAX_ID


class Id(fields.Integer):
    """A row id: a positive integer within the key column's range.

    JSON booleans are refused even though ``bool`` is an ``int`` subclass.
    """

    def __init__(self, **kwargs):  # type: ignore[no-untyped-def]
        kwargs.setdefault("validate", validate.Range(min=1, max=MAX_ID))
        super().__init__(**kwargs)

    def _deserialize(self, value, attr, data, **kwargs):  # type: ignore[no-untyped-def]
        if isinstance(value, bool):
            raise self.make_error("invalid")
        return super()._deserialize(value, attr, data, **kwargs)


class UtcDateTime(fields.DateTime):
    """Dump timestamps as UTC with an explicit offset.

    SQLite hands back naive values for ``DateTime(timezone=True)`` columns,
    while freshly created rows still hold aware ones.
    """

    def _serialize(self, value, attr, obj, **kwargs):  # type: ignore[no-untyped-def]
        if isinstance(value, datetime):
            if value.tzinfo is None:
                value = value.replace(tzinfo=timezone.utc)
            else:
                value = value.astimezone(timezone.utc)
        return super()._serialize(value, attr, obj, **kwargs)


class PaginationQuerySchema(Schema):
    """Validate ``page``/``limit``/``search`` query parameters."""

    class Meta:
        unknown = EXCLUDE

    page = fields.Integer(load_default=1, validate=validate.Range(min=1))
    limit = fields.Integer(load_default=None, validate=validate.Range(min=1))
    search = fields.String(load_default="")
