"""Repository layer for monthly bucket persistence."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from gold_ledger.models.monthly_data import MonthlyData
from gold_ledger.models.payment import Payment
from gold_ledger.models.winner import Winner


class MonthlyDataRepository:
    """CRUD, listing and counts for MonthlyData."""

    def get_by_id(self, session: Session, monthly_data_id: int) -> MonthlyData | None:
        return session.get(MonthlyData, monthly_data_id)

    def find_period(self, session: Session, *, cycle_id: int, month: int, year: int) -> MonthlyData | None:
        stmt = select(MonthlyData).where(
            MonthlyData.cycle_id == cycle_id,
            MonthlyData.month == month,
            MonthlyData.year == year,
        )
        return session.scalars(stmt).first()

    def create(self, session: Session, *, cycle_id: int, month: int, year: int) -> MonthlyData:
        monthly_data = MonthlyData(cycle_id=cycle_id, month=month, year=year)
        session.add(monthly_data)
        session.flush()
        return monthly_data

    def list_for_cycle(
        self,
        session: Session,
        cycle_id: int,
        *,
        offset: int | None = None,
        limit: int | None = None,
    ) -> tuple[Sequence[MonthlyData], int]:
        """Buckets of a cycle, latest period first. No offset/limit returns them all."""

        stmt = (
            select(MonthlyData)
            .where(MonthlyData.cycle_id == cycle_id)
            .order_by(MonthlyData.year.desc(), MonthlyData.month.desc())
        )
        if offset is not None:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)

        count_stmt = select(func.count(MonthlyData.id)).where(MonthlyData.cycle_id == cycle_id)
        return list(session.scalars(stmt).all()), int(session.scalar(count_stmt) or 0)

    def winner_counts(self, session: Session, monthly_data_ids: Sequence[int]) -> dict[int, int]:
        if not monthly_data_ids:
            return {}
        stmt = (
            select(Winner.monthly_data_id, func.count(Winner.id))
            .where(Winner.monthly_data_id.in_(monthly_data_ids))
            .group_by(Winner.monthly_data_id)
        )
        return {int(mid): int(n) for mid, n in session.execute(stmt).all()}

    def winner_counts_by_cycle(self, session: Session, cycle_ids: Sequence[int]) -> dict[int, list[int]]:
        """Per-bucket winner counts grouped by cycle id (buckets without winners count 0)."""

        if not cycle_ids:
            return {}
        stmt = (
            select(MonthlyData.cycle_id, func.count(Winner.id))
            .outerjoin(Winner, Winner.monthly_data_id == MonthlyData.id)
            .where(MonthlyData.cycle_id.in_(cycle_ids))
            .group_by(MonthlyData.cycle_id, MonthlyData.id)
        )
        out: dict[int, list[int]] = {}
        for cycle_id, count in session.execute(stmt).all():
            out.setdefault(int(cycle_id), []).append(int(count))
        return out

    def payment_counts(self, session: Session, monthly_data_id: int) -> tuple[int, int]:
        """Return ``(total, paid)`` payment rows for a bucket."""

        stmt = select(Payment.is_paid, func.count(Payment.id)).where(Payment.monthly_data_id == monthly_data_id).group_by(Payment.is_paid)
        total = paid = 0
        for is_paid, count in session.execute(stmt).all():
            total += int(count)
            if is_paid:
                paid += int(count)
        return total, paid
