"""Repository layer for winner persistence."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from gold_ledger.models.lot import Lot
from gold_ledger.models.winner import Winner


class WinnerRepository:
    """CRUD operations for Winner."""

    def get_by_id(self, session: Session, winner_id: int) -> Winner | None:
        return session.get(Winner, winner_id)

    def create_many(self, session: Session, monthly_data_id: int, lot_ids: Sequence[int]) -> list[Winner]:
        winners = [Winner(monthly_data_id=monthly_data_id, lot_id=lot_id) for lot_id in lot_ids]
        session.add_all(winners)
        session.flush()
        return winners

    def list_for_bucket(self, session: Session, monthly_data_id: int) -> Sequence[Winner]:
        stmt = (
            select(Winner)
            .options(joinedload(Winner.lot).joinedload(Lot.user))
            .where(Winner.monthly_data_id == monthly_data_id)
            .order_by(Winner.id.asc())
        )
        return list(session.scalars(stmt).unique().all())

    def existing_lot_ids(self, session: Session, monthly_data_id: int, lot_ids: Sequence[int]) -> set[int]:
        if not lot_ids:
            return set()
        stmt = select(Winner.lot_id).where(Winner.monthly_data_id == monthly_data_id, Winner.lot_id.in_(lot_ids))
        return {int(i) for i in session.scalars(stmt).all()}

    def delete(self, session: Session, winner: Winner) -> None:
        session.delete(winner)
        session.flush()
