"""Marshmallow schemas for members."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from gold_ledger.schemas.common import UtcDateTime


class UserSchema(Schema):
    """Serialize User."""

    id = fields.Integer()
    name = fields.String()
    member_id = fields.String(data_key="memberId")
    phone_number = fields.String(data_key="phoneNumber", allow_none=True)
    created_at = UtcDateTime(data_key="createdAt")


class UserCreateSchema(Schema):
    """Validate create User payload."""

    name = fields.String(required=True, validate=validate.Length(min=1, max=200))
    member_id = fields.String(data_key="memberId", required=True, validate=validate.Length(min=1, max=64))
    phone_number = fields.String(data_key="phoneNumber", load_default=None, allow_none=True)
