"""Monthly bucket and payment routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, request

from gold_ledger.db import get_session
from gold_ledger.schemas.monthly_data import (
    MonthlyDataCreateSchema,
    MonthlyDataSchema,
    PaymentBatchSchema,
    PaymentSchema,
)
from gold_ledger.schemas.program import CycleSchema
from gold_ledger.services.monthly_data_service import MonthlyDataService, PaymentUpdate
from gold_ledger.utils.paging import page_metadata, page_request_from_args
from gold_ledger.utils.responses import ok

monthly_data_bp = Blueprint("monthly_data", __name__)

_monthly_data_schema = MonthlyDataSchema()
_create_schema = MonthlyDataCreateSchema()
_payment_batch_schema = PaymentBatchSchema()
_payments_schema = PaymentSchema(many=True)
_cycle_schema = CycleSchema()
_service = MonthlyDataService()


@monthly_data_bp.post("/monthly-data")
def create_monthly_data():
    """Open a month for a cycle and create its unpaid payment roster."""

    payload = request.get_json(silent=True) or {}
    data = _create_schema.load(payload)

    created = _service.create_monthly_data(get_session(), data["cycle_id"], data["month"], data["year"])
    return ok(
        {**_monthly_data_schema.dump(created.monthly_data), "paymentCount": created.payment_count},
        "Monthly data created with payment records",
        201,
    )


@monthly_data_bp.post("/payments")
def record_monthly_payments():
    payload = request.get_json(silent=True) or {}
    data = _payment_batch_schema.load(payload)

    updates = [PaymentUpdate(lot_id=int(p["lot_id"]), is_paid=bool(p["is_paid"])) for p in data["payments"]]
    payments = _service.record_monthly_payments(get_session(), data["monthly_data_id"], updates)
    return ok(_payments_schema.dump(payments), "Payments recorded successfully")


@monthly_data_bp.get("/cycles/<id:cycle_id>/monthly-data")
def get_cycle_monthly_data(cycle_id: int):
    paging, _search = page_request_from_args()
    page = _service.get_cycle_monthly_data(get_session(), cycle_id, paging)

    return ok(
        {
            "monthlyData": [
                {**_monthly_data_schema.dump(s.monthly_data), "winnerCount": s.winner_count}
                for s in page.items
            ],
            "pagination": page_metadata(page),
        },
        "Monthly data fetched successfully",
    )


@monthly_data_bp.get("/monthly-data/<id:monthly_data_id>")
def get_monthly_data_details(monthly_data_id: int):
    details = _service.get_monthly_data_details(get_session(), monthly_data_id)
    cycle = details.monthly_data.cycle

    return ok(
        {
            **_monthly_data_schema.dump(details.monthly_data),
            "cycle": {
                **_cycle_schema.dump(cycle),
                "program": {"id": cycle.program.id, "name": cycle.program.name},
            },
            "winnerCount": details.winner_count,
            "paymentCount": details.payment_count,
            "paidCount": details.paid_count,
        },
        "Monthly data details fetched successfully",
    )


@monthly_data_bp.get("/monthly-data/<id:monthly_data_id>/payments")
def get_monthly_payments(monthly_data_id: int):
    payments = _service.get_monthly_payments(get_session(), monthly_data_id)
    return ok(_payments_schema.dump(payments), "Payments fetched successfully")
