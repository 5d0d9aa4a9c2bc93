"""Program and cycle routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, request

from gold_ledger.db import get_session
from gold_ledger.schemas.monthly_data import MonthlyDataSchema
from gold_ledger.schemas.program import CycleSchema, ProgramCreateSchema, ProgramSchema
from gold_ledger.services.cycle_service import CycleService, CycleStats
from gold_ledger.services.program_service import ProgramService
from gold_ledger.utils.paging import page_metadata, page_request_from_args
from gold_ledger.utils.responses import ok

programs_bp = Blueprint("programs", __name__)

_program_schema = ProgramSchema()
_create_schema = ProgramCreateSchema()
_cycle_schema = CycleSchema()
_cycles_schema = CycleSchema(many=True)
_monthly_data_schema = MonthlyDataSchema()
_programs = ProgramService()
_cycles = CycleService()


def _dump_cycle_stats(stats: CycleStats) -> dict:
    return {
        **_cycle_schema.dump(stats.cycle),
        "lotCount": stats.lot_count,
        "monthlyDataCount": stats.monthly_data_count,
        "totalWinners": stats.total_winners,
    }


@programs_bp.post("/programs")
def create_program():
    payload = request.get_json(silent=True) or {}
    data = _create_schema.load(payload)

    program = _programs.create_program(get_session(), data["name"], data["description"])
    return ok(_program_schema.dump(program), "Gold investment program created successfully", 201)


@programs_bp.get("/programs")
def list_programs():
    paging, search = page_request_from_args()
    page = _programs.list_programs(get_session(), paging, search)

    return ok(
        {
            "programs": [
                {**_program_schema.dump(item.program), "cycleCount": item.cycle_count}
                for item in page.items
            ],
            "pagination": page_metadata(page),
        },
        "Gold investment programs fetched successfully",
    )


@programs_bp.get("/programs/<id:program_id>")
def get_program_details(program_id: int):
    details = _programs.get_program_details(get_session(), program_id)

    return ok(
        {
            **_program_schema.dump(details.program),
            "cycles": _cycles_schema.dump(details.recent_cycles),
            "cycleCount": details.cycle_count,
        },
        "Program details fetched successfully",
    )


@programs_bp.patch("/programs/<id:program_id>/status")
def toggle_program_status(program_id: int):
    program = _programs.toggle_program_status(get_session(), program_id)
    return ok(_program_schema.dump(program), "Program status updated successfully")


@programs_bp.post("/programs/<id:program_id>/start-cycle")
def start_new_cycle(program_id: int):
    cycle = _cycles.start_new_cycle(get_session(), program_id)
    return ok(_cycle_schema.dump(cycle), "New cycle started successfully", 201)


@programs_bp.post("/programs/<id:program_id>/end-cycle")
def end_current_cycle(program_id: int):
    transition = _cycles.end_current_cycle(get_session(), program_id)

    return ok(
        {
            "endedCycle": _cycle_schema.dump(transition.ended_cycle),
            "newCycle": _cycle_schema.dump(transition.new_cycle),
        },
        "Cycle ended and new cycle started successfully",
    )


@programs_bp.get("/programs/<id:program_id>/cycles")
def get_program_cycles(program_id: int):
    paging, _search = page_request_from_args()
    page = _cycles.get_program_cycles(get_session(), program_id, paging)

    return ok(
        {
            "cycles": [_dump_cycle_stats(s) for s in page.items],
            "pagination": page_metadata(page),
        },
        "Program cycles fetched successfully",
    )


@programs_bp.get("/cycles/<id:cycle_id>")
def get_cycle_details(cycle_id: int):
    details = _cycles.get_cycle_details(get_session(), cycle_id)

    return ok(
        {
            **_dump_cycle_stats(details.stats),
            "program": {"id": details.program.id, "name": details.program.name},
            "monthlyData": [
                {**_monthly_data_schema.dump(s.monthly_data), "winnerCount": s.winner_count}
                for s in details.monthly_data
            ],
        },
        "Cycle details fetched successfully",
    )
