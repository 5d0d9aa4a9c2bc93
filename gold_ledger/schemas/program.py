"""Marshmallow schemas for programs and cycles."""

from __future__ import annotations

from marshmallow import Schema, fields

from gold_ledger.schemas.common import UtcDateTime


class ProgramSchema(Schema):
    """Serialize Program."""

    id = fields.Integer()
    name = fields.String()
    description = fields.String(allow_none=True)
    is_active = fields.Boolean(data_key="isActive")
    current_cycle_id = fields.Integer(data_key="currentCycleId", allow_none=True)
    created_at = UtcDateTime(data_key="createdAt")


class ProgramCreateSchema(Schema):
    """Validate create Program payload; a missing name is reported by the service."""

    name = fields.String(load_default=None, allow_none=True)
    description = fields.String(load_default=None, allow_none=True)


class CycleSchema(Schema):
    """Serialize Cycle."""

    id = fields.Integer()
    program_id = fields.Integer(data_key="programId")
    is_active = fields.Boolean(data_key="isActive")
    start_date = UtcDateTime(data_key="startDate")
    end_date = UtcDateTime(data_key="endDate", allow_none=True)
    created_at = UtcDateTime(data_key="createdAt")
