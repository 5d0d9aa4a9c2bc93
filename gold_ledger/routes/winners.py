"""Winner routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, request

from gold_ledger.db import get_session
from gold_ledger.schemas.winner import WinnerBatchSchema, WinnerSchema
from gold_ledger.services.winner_service import WinnerService
from gold_ledger.utils.responses import ok

winners_bp = Blueprint("winners", __name__)

_winners_schema = WinnerSchema(many=True)
_batch_schema = WinnerBatchSchema()
_service = WinnerService()


@winners_bp.post("/winners")
def add_winners():
    payload = request.get_json(silent=True) or {}
    data = _batch_schema.load(payload)

    winners = _service.add_winners(get_session(), data["monthly_data_id"], data["lot_ids"])
    return ok(_winners_schema.dump(winners), "Winners added successfully", 201)


@winners_bp.get("/monthly-data/<id:monthly_data_id>/winners")
def get_monthly_winners(monthly_data_id: int):
    winners = _service.get_monthly_winners(get_session(), monthly_data_id)
    return ok(_winners_schema.dump(winners), "Winners fetched successfully")


@winners_bp.delete("/winners/<id:winner_id>")
def remove_winner(winner_id: int):
    _service.remove_winner(get_session(), winner_id)
    return ok(None, "Winner removed successfully")
