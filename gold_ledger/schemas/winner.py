"""Marshmallow schemas for winners."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from gold_ledger.schemas.common import Id, UtcDateTime
from gold_ledger.schemas.lot import LotSchema


class WinnerSchema(Schema):
    """Serialize Winner with its lot and member."""

    id = fields.Integer()
    monthly_data_id = fields.Integer(data_key="monthlyDataId")
    lot_id = fields.Integer(data_key="lotId")
    created_at = UtcDateTime(data_key="createdAt")
    lot = fields.Nested(LotSchema)


class WinnerBatchSchema(Schema):
    """Validate add-winners payload."""

    monthly_data_id = Id(
        data_key="monthlyDataId",
        required=True,
        error_messages={"required": "Monthly data ID and array of lot IDs are required"},
    )
    lot_ids = fields.List(
        Id(strict=True),
        data_key="lotIds",
        required=True,
        validate=validate.Length(min=1),
        error_messages={"required": "Monthly data ID and array of lot IDs are required"},
    )
