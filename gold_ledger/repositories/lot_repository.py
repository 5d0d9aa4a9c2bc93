"""Repository layer for lot persistence."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from gold_ledger.models.lot import Lot
from gold_ledger.models.user import User


class LotRepository:
    """CRUD and listing for Lot."""

    def get_by_id(self, session: Session, lot_id: int) -> Lot | None:
        return session.get(Lot, lot_id)

    def find_active(self, session: Session, *, cycle_id: int, user_id: int) -> Lot | None:
        stmt = select(Lot).where(
            Lot.cycle_id == cycle_id,
            Lot.user_id == user_id,
            Lot.is_active.is_(True),
        )
        return session.scalars(stmt).first()

    def create(self, session: Session, *, cycle_id: int, user_id: int) -> Lot:
        lot = Lot(cycle_id=cycle_id, user_id=user_id, is_active=True)
        session.add(lot)
        session.flush()
        return lot

    def list_for_cycle(
        self,
        session: Session,
        cycle_id: int,
        *,
        search: str,
        offset: int,
        limit: int,
    ) -> tuple[Sequence[Lot], int]:
        """Lots of a cycle, newest first, optionally filtered by member name or memberId."""

        conditions = [Lot.cycle_id == cycle_id]
        if search:
            conditions.append(
                or_(
                    User.name.contains(search, autoescape=True),
                    User.member_id.contains(search, autoescape=True),
                )
            )

        stmt = (
            select(Lot)
            .join(User, Lot.user_id == User.id)
            .where(*conditions)
            .order_by(Lot.created_at.desc(), Lot.id.desc())
            .offset(offset)
            .limit(limit)
        )
        count_stmt = select(func.count(Lot.id)).join(User, Lot.user_id == User.id).where(*conditions)

        lots = list(session.scalars(stmt).unique().all())
        return lots, int(session.scalar(count_stmt) or 0)

    def active_ids_in_cycle(self, session: Session, cycle_id: int) -> list[int]:
        stmt = select(Lot.id).where(Lot.cycle_id == cycle_id, Lot.is_active.is_(True)).order_by(Lot.id)
        return [int(i) for i in session.scalars(stmt).all()]

    def ids_in_cycle(self, session: Session, cycle_id: int, lot_ids: Sequence[int], *, active_only: bool) -> set[int]:
        """Subset of ``lot_ids`` that belong to ``cycle_id`` (and are active, if asked)."""

        if not lot_ids:
            return set()
        stmt = select(Lot.id).where(Lot.cycle_id == cycle_id, Lot.id.in_(lot_ids))
        if active_only:
            stmt = stmt.where(Lot.is_active.is_(True))
        return {int(i) for i in session.scalars(stmt).all()}
