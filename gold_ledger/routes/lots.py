"""Lot routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, request

from gold_ledger.db import get_session
from gold_ledger.schemas.lot import LotCreateSchema, LotSchema
from gold_ledger.services.lot_service import LotService
from gold_ledger.utils.paging import page_metadata, page_request_from_args
from gold_ledger.utils.responses import ok

lots_bp = Blueprint("lots", __name__)

_lot_schema = LotSchema()
_lots_schema = LotSchema(many=True)
_create_schema = LotCreateSchema()
_service = LotService()


@lots_bp.post("/lots")
def add_user_to_program():
    """Give a member a lot in the program's active cycle."""

    payload = request.get_json(silent=True) or {}
    data = _create_schema.load(payload)

    lot = _service.add_user_to_program(get_session(), data["program_id"], data["user_id"])
    return ok(_lot_schema.dump(lot), "User added to program successfully", 201)


@lots_bp.get("/cycles/<id:cycle_id>/lots")
def get_cycle_lots(cycle_id: int):
    paging, search = page_request_from_args()
    page = _service.get_cycle_lots(get_session(), cycle_id, paging, search)

    return ok(
        {"lots": _lots_schema.dump(page.items), "pagination": page_metadata(page)},
        "Cycle lots fetched successfully",
    )


@lots_bp.patch("/lots/<id:lot_id>/status")
def toggle_lot_status(lot_id: int):
    lot = _service.toggle_lot_status(get_session(), lot_id)
    return ok(_lot_schema.dump(lot), "Lot status updated successfully")
