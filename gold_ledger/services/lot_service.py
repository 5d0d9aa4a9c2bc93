"""Service layer for lot use-cases."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from gold_ledger.errors import ConflictError, NotFoundError, ValidationError
from gold_ledger.models.lot import Lot
from gold_ledger.repositories.cycle_repository import CycleRepository
from gold_ledger.repositories.lot_repository import LotRepository
from gold_ledger.repositories.program_repository import ProgramRepository
from gold_ledger.repositories.user_repository import UserRepository
from gold_ledger.services.paging import Page, PageRequest

logger = logging.getLogger(__name__)


class LotService:
    """Enrol members into a program's active cycle and manage their lots."""

    def __init__(
        self,
        repository: LotRepository | None = None,
        programs: ProgramRepository | None = None,
        cycles: CycleRepository | None = None,
        users: UserRepository | None = None,
    ) -> None:
        self._repo = repository or LotRepository()
        self._programs = programs or ProgramRepository()
        self._cycles = cycles or CycleRepository()
        self._users = users or UserRepository()

    def add_user_to_program(self, session: Session, program_id: int | None, user_id: int | None) -> Lot:
        if not program_id or not user_id:
            raise ValidationError(message="Program ID and User ID are required")

        program = self._programs.get_by_id(session, program_id)
        if program is None:
            raise NotFoundError(message="Program not found")
        if not program.is_active:
            raise ValidationError(message="Program is not active")

        cycle = self._cycles.get_active_for_program(session, program.id)
        if cycle is None:
            raise ValidationError(message="No active cycle")

        if self._users.get_by_id(session, user_id) is None:
            raise NotFoundError(message="User not found")

        if self._repo.find_active(session, cycle_id=cycle.id, user_id=user_id) is not None:
            raise ConflictError(message="User already has an active lot in this cycle")

        lot = self._repo.create(session, cycle_id=cycle.id, user_id=user_id)
        logger.info("User %s joined program %s with lot %s (cycle %s)", user_id, program.id, lot.id, cycle.id)
        return lot

    def toggle_lot_status(self, session: Session, lot_id: int) -> Lot:
        lot = self._repo.get_by_id(session, lot_id)
        if lot is None:
            raise NotFoundError(message="Lot not found")

        if not lot.is_active:
            # Re-activation must not create a second active lot for the member.
            other = self._repo.find_active(session, cycle_id=lot.cycle_id, user_id=lot.user_id)
            if other is not None and other.id != lot.id:
                raise ConflictError(message="User already has an active lot in this cycle")

        lot.is_active = not lot.is_active
        session.flush()
        logger.info("Lot %s is now %s", lot.id, "active" if lot.is_active else "inactive")
        return lot

    def get_cycle_lots(self, session: Session, cycle_id: int, paging: PageRequest, search: str = "") -> Page:
        if self._cycles.get_by_id(session, cycle_id) is None:
            raise NotFoundError(message="Cycle not found")

        lots, total = self._repo.list_for_cycle(
            session,
            cycle_id,
            search=search,
            offset=paging.offset,
            limit=paging.limit,
        )
        return Page(items=lots, total_count=total, request=paging)
