"""Marshmallow schemas for lots."""

from __future__ import annotations

from marshmallow import Schema, fields

from gold_ledger.schemas.common import Id, UtcDateTime
from gold_ledger.schemas.user import UserSchema


class LotSchema(Schema):
    """Serialize Lot with its member."""

    id = fields.Integer()
    cycle_id = fields.Integer(data_key="cycleId")
    user_id = fields.Integer(data_key="userId")
    is_active = fields.Boolean(data_key="isActive")
    created_at = UtcDateTime(data_key="createdAt")
    user = fields.Nested(UserSchema, only=("id", "name", "member_id", "phone_number"))


class LotCreateSchema(Schema):
    """Validate add-user-to-program payload; missing ids are reported by the service."""

    program_id = Id(data_key="programId", load_default=None, allow_none=True)
    user_id = Id(data_key="userId", load_default=None, allow_none=True)
