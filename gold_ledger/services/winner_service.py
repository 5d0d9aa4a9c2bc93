"""Service layer for winner selection."""

from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy.orm import Session

from gold_ledger.errors import ConflictError, NotFoundError, ValidationError
from gold_ledger.models.winner import Winner
from gold_ledger.repositories.lot_repository import LotRepository
from gold_ledger.repositories.payment_repository import PaymentRepository
from gold_ledger.repositories.winner_repository import WinnerRepository
from gold_ledger.services.monthly_data_service import MonthlyDataService

logger = logging.getLogger(__name__)


class WinnerService:
    """Mark paid, active lots as winners of a monthly bucket.

    Every check runs before the first insert, and the whole batch is
    rejected when any lot fails one.
    """

    def __init__(
        self,
        repository: WinnerRepository | None = None,
        lots: LotRepository | None = None,
        payments: PaymentRepository | None = None,
        monthly_data: MonthlyDataService | None = None,
    ) -> None:
        self._repo = repository or WinnerRepository()
        self._lots = lots or LotRepository()
        self._payments = payments or PaymentRepository()
        self._monthly_data = monthly_data or MonthlyDataService()

    def add_winners(self, session: Session, monthly_data_id: int, lot_ids: Sequence[int]) -> list[Winner]:
        if not monthly_data_id or not lot_ids:
            raise ValidationError(message="Monthly data ID and array of lot IDs are required")
        if len(set(lot_ids)) != len(lot_ids):
            raise ValidationError(message="Each lot may appear only once per winner batch")

        monthly_data = self._monthly_data.get_open_monthly_data(session, monthly_data_id)

        eligible = self._lots.ids_in_cycle(session, monthly_data.cycle_id, lot_ids, active_only=True)
        if len(eligible) != len(lot_ids):
            raise ValidationError(
                message="One or more lots are invalid or not active",
                details=[{"lotIds": sorted(set(lot_ids) - eligible)}],
            )

        # A lot without a payment row (enrolled after the bucket was created) counts as unpaid.
        unpaid = set(lot_ids) - self._payments.paid_lot_ids(session, monthly_data.id, lot_ids)
        if unpaid:
            raise ValidationError(
                message="One or more selected lots haven't paid for this month",
                details=[{"lotIds": sorted(unpaid)}],
            )

        already = self._repo.existing_lot_ids(session, monthly_data.id, lot_ids)
        if already:
            raise ConflictError(
                message="One or more selected lots are already winners for this month",
                details=[{"lotIds": sorted(already)}],
            )

        winners = self._repo.create_many(session, monthly_data.id, lot_ids)
        logger.info("Added %d winners to monthly data %s", len(winners), monthly_data.id)
        return winners

    def get_monthly_winners(self, session: Session, monthly_data_id: int) -> Sequence[Winner]:
        monthly_data = self._monthly_data.get_monthly_data(session, monthly_data_id)
        return self._repo.list_for_bucket(session, monthly_data.id)

    def remove_winner(self, session: Session, winner_id: int) -> None:
        winner = self._repo.get_by_id(session, winner_id)
        if winner is None:
            raise NotFoundError(message="Winner not found")
        self._repo.delete(session, winner)
        logger.info("Removed winner %s (lot %s, monthly data %s)", winner_id, winner.lot_id, winner.monthly_data_id)
