"""Repository layer for cycle persistence."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from gold_ledger.models.base import utcnow
from gold_ledger.models.cycle import Cycle
from gold_ledger.models.lot import Lot
from gold_ledger.models.monthly_data import MonthlyData


class CycleRepository:
    """CRUD, listing and aggregate counts for Cycle."""

    def get_by_id(self, session: Session, cycle_id: int) -> Cycle | None:
        return session.get(Cycle, cycle_id)

    def get_active_for_program(self, session: Session, program_id: int) -> Cycle | None:
        stmt = select(Cycle).where(Cycle.program_id == program_id, Cycle.is_active.is_(True))
        return session.scalars(stmt).first()

    def create(self, session: Session, program_id: int) -> Cycle:
        cycle = Cycle(program_id=program_id, is_active=True, start_date=utcnow())
        session.add(cycle)
        session.flush()
        return cycle

    def end(self, session: Session, cycle: Cycle, ended_at: datetime | None = None) -> Cycle:
        cycle.is_active = False
        cycle.end_date = ended_at or utcnow()
        # Must reach the database before the next active cycle is inserted.
        session.flush()
        return cycle

    def _newest_first(self, program_id: int) -> Select[tuple[Cycle]]:
        return (
            select(Cycle)
            .where(Cycle.program_id == program_id)
            .order_by(Cycle.start_date.desc(), Cycle.id.desc())
        )

    def recent_for_program(self, session: Session, program_id: int, limit: int = 5) -> Sequence[Cycle]:
        return list(session.scalars(self._newest_first(program_id).limit(limit)).all())

    def list_for_program(
        self,
        session: Session,
        program_id: int,
        *,
        offset: int,
        limit: int,
    ) -> tuple[Sequence[Cycle], int]:
        cycles = list(session.scalars(self._newest_first(program_id).offset(offset).limit(limit)).all())
        return cycles, self.count_for_program(session, program_id)

    def count_for_program(self, session: Session, program_id: int) -> int:
        stmt = select(func.count(Cycle.id)).where(Cycle.program_id == program_id)
        return int(session.scalar(stmt) or 0)

    def lot_counts(self, session: Session, cycle_ids: Sequence[int]) -> dict[int, int]:
        if not cycle_ids:
            return {}
        stmt = select(Lot.cycle_id, func.count(Lot.id)).where(Lot.cycle_id.in_(cycle_ids)).group_by(Lot.cycle_id)
        return {int(cid): int(n) for cid, n in session.execute(stmt).all()}

    def monthly_data_counts(self, session: Session, cycle_ids: Sequence[int]) -> dict[int, int]:
        if not cycle_ids:
            return {}
        stmt = (
            select(MonthlyData.cycle_id, func.count(MonthlyData.id))
            .where(MonthlyData.cycle_id.in_(cycle_ids))
            .group_by(MonthlyData.cycle_id)
        )
        return {int(cid): int(n) for cid, n in session.execute(stmt).all()}
