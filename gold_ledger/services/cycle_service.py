"""Service layer for the cycle lifecycle.

States per program: no active cycle -> active -> ended. Ending a cycle starts
the next one in the same transaction, so a started program always has exactly
one active cycle, and ``Program.current_cycle_id`` is written in that same
transaction as the cycle rows it points at.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from sqlalchemy.orm import Session

from gold_ledger.errors import ConflictError, NotFoundError, ValidationError
from gold_ledger.models.cycle import Cycle
from gold_ledger.models.program import Program
from gold_ledger.repositories.cycle_repository import CycleRepository
from gold_ledger.repositories.monthly_data_repository import MonthlyDataRepository
from gold_ledger.repositories.program_repository import ProgramRepository
from gold_ledger.services.monthly_data_service import MonthlyDataSummary
from gold_ledger.services.paging import Page, PageRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CycleTransition:
    ended_cycle: Cycle
    new_cycle: Cycle


@dataclass(frozen=True)
class CycleStats:
    cycle: Cycle
    lot_count: int
    monthly_data_count: int
    total_winners: int


@dataclass(frozen=True)
class CycleDetails:
    stats: CycleStats
    program: Program
    monthly_data: Sequence[MonthlyDataSummary]


class CycleService:
    """Start, end and inspect program cycles."""

    def __init__(
        self,
        repository: CycleRepository | None = None,
        programs: ProgramRepository | None = None,
        monthly_data: MonthlyDataRepository | None = None,
    ) -> None:
        self._repo = repository or CycleRepository()
        self._programs = programs or ProgramRepository()
        self._monthly_data = monthly_data or MonthlyDataRepository()

    def _get_program(self, session: Session, program_id: int) -> Program:
        program = self._programs.get_by_id(session, program_id)
        if program is None:
            raise NotFoundError(message="Program not found")
        return program

    def get_cycle(self, session: Session, cycle_id: int) -> Cycle:
        cycle = self._repo.get_by_id(session, cycle_id)
        if cycle is None:
            raise NotFoundError(message="Cycle not found")
        return cycle

    def start_new_cycle(self, session: Session, program_id: int) -> Cycle:
        program = self._get_program(session, program_id)
        if not program.is_active:
            raise ValidationError(message="Program is not active")
        if self._repo.get_active_for_program(session, program.id) is not None:
            raise ConflictError(message="Program already has an active cycle")

        cycle = self._repo.create(session, program.id)
        program.current_cycle_id = cycle.id
        session.flush()

        logger.info("Started cycle %s for program %s", cycle.id, program.id)
        return cycle

    def end_current_cycle(self, session: Session, program_id: int) -> CycleTransition:
        program = self._get_program(session, program_id)
        current = self._repo.get_active_for_program(session, program.id)
        if current is None:
            raise ValidationError(message="No active cycle found for this program")

        ended = self._repo.end(session, current)
        new_cycle = self._repo.create(session, program.id)
        program.current_cycle_id = new_cycle.id
        session.flush()

        logger.info("Ended cycle %s and started cycle %s for program %s", ended.id, new_cycle.id, program.id)
        return CycleTransition(ended_cycle=ended, new_cycle=new_cycle)

    def _stats(self, session: Session, cycles: Sequence[Cycle]) -> list[CycleStats]:
        ids = [c.id for c in cycles]
        lot_counts = self._repo.lot_counts(session, ids)
        bucket_counts = self._repo.monthly_data_counts(session, ids)
        winners_per_bucket = self._monthly_data.winner_counts_by_cycle(session, ids)

        return [
            CycleStats(
                cycle=c,
                lot_count=lot_counts.get(c.id, 0),
                monthly_data_count=bucket_counts.get(c.id, 0),
                total_winners=sum(winners_per_bucket.get(c.id, [])),
            )
            for c in cycles
        ]

    def get_program_cycles(self, session: Session, program_id: int, paging: PageRequest) -> Page:
        program = self._get_program(session, program_id)
        cycles, total = self._repo.list_for_program(
            session,
            program.id,
            offset=paging.offset,
            limit=paging.limit,
        )
        return Page(items=self._stats(session, cycles), total_count=total, request=paging)

    def get_cycle_details(self, session: Session, cycle_id: int) -> CycleDetails:
        cycle = self.get_cycle(session, cycle_id)

        buckets, bucket_total = self._monthly_data.list_for_cycle(session, cycle.id)
        winner_counts = self._monthly_data.winner_counts(session, [b.id for b in buckets])
        summaries = [MonthlyDataSummary(monthly_data=b, winner_count=winner_counts.get(b.id, 0)) for b in buckets]

        stats = CycleStats(
            cycle=cycle,
            lot_count=self._repo.lot_counts(session, [cycle.id]).get(cycle.id, 0),
            monthly_data_count=bucket_total,
            total_winners=sum(s.winner_count for s in summaries),
        )
        return CycleDetails(stats=stats, program=cycle.program, monthly_data=summaries)
