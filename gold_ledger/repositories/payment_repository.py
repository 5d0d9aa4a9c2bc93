"""Repository layer for payment persistence."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from gold_ledger.models.lot import Lot
from gold_ledger.models.payment import Payment


class PaymentRepository:
    """Placeholder fan-out, upserts and reads for Payment."""

    def create_placeholders(self, session: Session, monthly_data_id: int, lot_ids: Iterable[int]) -> int:
        """Insert one unpaid payment per lot; returns the number of rows added."""

        rows = [Payment(monthly_data_id=monthly_data_id, lot_id=lot_id, is_paid=False) for lot_id in lot_ids]
        session.add_all(rows)
        session.flush()
        return len(rows)

    def get(self, session: Session, *, monthly_data_id: int, lot_id: int) -> Payment | None:
        stmt = select(Payment).where(Payment.monthly_data_id == monthly_data_id, Payment.lot_id == lot_id)
        return session.scalars(stmt).first()

    def upsert(
        self,
        session: Session,
        *,
        monthly_data_id: int,
        lot_id: int,
        is_paid: bool,
        paid_at: datetime,
    ) -> Payment:
        """Create or update the payment keyed by (monthly_data_id, lot_id)."""

        payment = self.get(session, monthly_data_id=monthly_data_id, lot_id=lot_id)
        if payment is None:
            payment = Payment(monthly_data_id=monthly_data_id, lot_id=lot_id)
            session.add(payment)

        payment.is_paid = is_paid
        payment.payment_date = paid_at if is_paid else None
        session.flush()
        return payment

    def list_for_bucket(self, session: Session, monthly_data_id: int) -> Sequence[Payment]:
        stmt = (
            select(Payment)
            .options(joinedload(Payment.lot).joinedload(Lot.user))
            .where(Payment.monthly_data_id == monthly_data_id)
            .order_by(Payment.lot_id.asc())
        )
        return list(session.scalars(stmt).unique().all())

    def paid_lot_ids(self, session: Session, monthly_data_id: int, lot_ids: Sequence[int]) -> set[int]:
        """Subset of ``lot_ids`` with a paid payment row in the bucket."""

        if not lot_ids:
            return set()
        stmt = select(Payment.lot_id).where(
            Payment.monthly_data_id == monthly_data_id,
            Payment.lot_id.in_(lot_ids),
            Payment.is_paid.is_(True),
        )
        return {int(i) for i in session.scalars(stmt).all()}
