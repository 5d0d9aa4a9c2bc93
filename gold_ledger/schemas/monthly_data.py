"""Marshmallow schemas for monthly buckets and payments."""

from __future__ import annotations

from marshmallow import Schema, ValidationError, fields, validate, validates_schema

from gold_ledger.schemas.common import Id, UtcDateTime
from gold_ledger.schemas.lot import LotSchema

_REQUIRED_PERIOD = {"required": "Cycle ID, month, and year are required"}


class MonthlyDataSchema(Schema):
    """Serialize MonthlyData."""

    id = fields.Integer()
    cycle_id = fields.Integer(data_key="cycleId")
    month = fields.Integer()
    year = fields.Integer()
    created_at = UtcDateTime(data_key="createdAt")


class MonthlyDataCreateSchema(Schema):
    """Validate create MonthlyData payload."""

    cycle_id = Id(data_key="cycleId", required=True, error_messages=_REQUIRED_PERIOD)
    month = fields.Integer(required=True, validate=validate.Range(min=1, max=12), error_messages=_REQUIRED_PERIOD)
    year = fields.Integer(required=True, validate=validate.Range(min=2000, max=2100), error_messages=_REQUIRED_PERIOD)


class PaymentSchema(Schema):
    """Serialize Payment with its lot."""

    id = fields.Integer()
    monthly_data_id = fields.Integer(data_key="monthlyDataId")
    lot_id = fields.Integer(data_key="lotId")
    is_paid = fields.Boolean(data_key="isPaid")
    payment_date = UtcDateTime(data_key="paymentDate", allow_none=True)
    created_at = UtcDateTime(data_key="createdAt")
    lot = fields.Nested(LotSchema)


class PaymentItemSchema(Schema):
    lot_id = Id(data_key="lotId", required=True)
    is_paid = fields.Boolean(data_key="isPaid", required=True)


class PaymentBatchSchema(Schema):
    """Validate record-payments payload."""

    monthly_data_id = Id(data_key="monthlyDataId", required=True)
    payments = fields.List(
        fields.Nested(PaymentItemSchema),
        required=True,
        validate=validate.Length(min=1),
    )

    @validates_schema
    def _validate_unique_lots(self, data, **kwargs):  # type: ignore[no-untyped-def]
        lot_ids = [int(p["lot_id"]) for p in data.get("payments") or []]
        if len(lot_ids) != len(set(lot_ids)):
            raise ValidationError({"payments": ["Each lot may appear only once per payment batch"]})
