"""Service layer for monthly buckets and payment tracking."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

from sqlalchemy.orm import Session

from gold_ledger.errors import ConflictError, NotFoundError, ValidationError
from gold_ledger.models.base import utcnow
from gold_ledger.models.monthly_data import MonthlyData
from gold_ledger.models.payment import Payment
from gold_ledger.repositories.cycle_repository import CycleRepository
from gold_ledger.repositories.lot_repository import LotRepository
from gold_ledger.repositories.monthly_data_repository import MonthlyDataRepository
from gold_ledger.repositories.payment_repository import PaymentRepository
from gold_ledger.services.paging import Page, PageRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MonthlyDataSummary:
    monthly_data: MonthlyData
    winner_count: int


@dataclass(frozen=True)
class CreatedMonthlyData:
    monthly_data: MonthlyData
    payment_count: int


@dataclass(frozen=True)
class MonthlyDataDetails:
    monthly_data: MonthlyData
    winner_count: int
    payment_count: int
    paid_count: int


@dataclass(frozen=True)
class PaymentUpdate:
    lot_id: int
    is_paid: bool


class MonthlyDataService:
    """Create monthly buckets, fan out payment placeholders and record payments."""

    def __init__(
        self,
        repository: MonthlyDataRepository | None = None,
        payments: PaymentRepository | None = None,
        cycles: CycleRepository | None = None,
        lots: LotRepository | None = None,
    ) -> None:
        self._repo = repository or MonthlyDataRepository()
        self._payments = payments or PaymentRepository()
        self._cycles = cycles or CycleRepository()
        self._lots = lots or LotRepository()

    def get_monthly_data(self, session: Session, monthly_data_id: int) -> MonthlyData:
        monthly_data = self._repo.get_by_id(session, monthly_data_id)
        if monthly_data is None:
            raise NotFoundError(message="Monthly data not found")
        return monthly_data

    def get_open_monthly_data(self, session: Session, monthly_data_id: int) -> MonthlyData:
        """Bucket that still accepts writes (its cycle is active)."""

        monthly_data = self.get_monthly_data(session, monthly_data_id)
        if not monthly_data.cycle.is_active:
            raise ValidationError(message="Cycle is not active")
        return monthly_data

    def create_monthly_data(self, session: Session, cycle_id: int, month: int, year: int) -> CreatedMonthlyData:
        """Create the bucket and an unpaid payment for every active lot of the cycle.

        Both writes share the request transaction: a bucket never persists
        without its full payment roster.
        """

        cycle = self._cycles.get_by_id(session, cycle_id)
        if cycle is None:
            raise NotFoundError(message="Cycle not found")
        if not cycle.is_active:
            raise ValidationError(message="Cycle is not active")

        if self._repo.find_period(session, cycle_id=cycle.id, month=month, year=year) is not None:
            raise ConflictError(message="Monthly data already exists for this period")

        monthly_data = self._repo.create(session, cycle_id=cycle.id, month=month, year=year)
        lot_ids = self._lots.active_ids_in_cycle(session, cycle.id)
        created = self._payments.create_placeholders(session, monthly_data.id, lot_ids)

        logger.info(
            "Created monthly data %s (%02d/%d) for cycle %s with %d payment placeholders",
            monthly_data.id,
            month,
            year,
            cycle.id,
            created,
        )
        return CreatedMonthlyData(monthly_data=monthly_data, payment_count=created)

    def record_monthly_payments(
        self,
        session: Session,
        monthly_data_id: int,
        payments: Iterable[PaymentUpdate],
    ) -> list[Payment]:
        payments = list(payments)
        lot_ids = [p.lot_id for p in payments]
        if len(lot_ids) != len(set(lot_ids)):
            raise ValidationError(message="Each lot may appear only once per payment batch")

        monthly_data = self.get_open_monthly_data(session, monthly_data_id)

        known = self._lots.ids_in_cycle(session, monthly_data.cycle_id, lot_ids, active_only=False)
        unknown = sorted(set(lot_ids) - known)
        if unknown:
            raise ValidationError(
                message="One or more lots do not belong to this cycle",
                details=[{"lotIds": unknown}],
            )

        now = utcnow()
        results = [
            self._payments.upsert(
                session,
                monthly_data_id=monthly_data.id,
                lot_id=p.lot_id,
                is_paid=p.is_paid,
                paid_at=now,
            )
            for p in payments
        ]

        logger.info(
            "Recorded %d payments for monthly data %s (%d paid)",
            len(results),
            monthly_data.id,
            sum(1 for r in results if r.is_paid),
        )
        return results

    def get_monthly_payments(self, session: Session, monthly_data_id: int) -> Sequence[Payment]:
        monthly_data = self.get_monthly_data(session, monthly_data_id)
        return self._payments.list_for_bucket(session, monthly_data.id)

    def get_cycle_monthly_data(self, session: Session, cycle_id: int, paging: PageRequest) -> Page:
        if self._cycles.get_by_id(session, cycle_id) is None:
            raise NotFoundError(message="Cycle not found")

        buckets, total = self._repo.list_for_cycle(session, cycle_id, offset=paging.offset, limit=paging.limit)
        counts = self._repo.winner_counts(session, [b.id for b in buckets])
        items = [MonthlyDataSummary(monthly_data=b, winner_count=counts.get(b.id, 0)) for b in buckets]
        return Page(items=items, total_count=total, request=paging)

    def get_monthly_data_details(self, session: Session, monthly_data_id: int) -> MonthlyDataDetails:
        monthly_data = self.get_monthly_data(session, monthly_data_id)
        payment_count, paid_count = self._repo.payment_counts(session, monthly_data.id)
        return MonthlyDataDetails(
            monthly_data=monthly_data,
            winner_count=self._repo.winner_counts(session, [monthly_data.id]).get(monthly_data.id, 0),
            payment_count=payment_count,
            paid_count=paid_count,
        )
