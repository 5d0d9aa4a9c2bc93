"""Service layer for gold program use-cases."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from sqlalchemy.orm import Session

from gold_ledger.errors import NotFoundError, ValidationError
from gold_ledger.models.cycle import Cycle
from gold_ledger.models.program import Program
from gold_ledger.repositories.cycle_repository import CycleRepository
from gold_ledger.repositories.program_repository import ProgramRepository
from gold_ledger.services.paging import Page, PageRequest

logger = logging.getLogger(__name__)

RECENT_CYCLES = 5


@dataclass(frozen=True)
class ProgramSummary:
    program: Program
    cycle_count: int


@dataclass(frozen=True)
class ProgramDetails:
    program: Program
    recent_cycles: Sequence[Cycle]
    cycle_count: int


class ProgramService:
    """Program use-cases: create, list, toggle and inspect."""

    def __init__(
        self,
        repository: ProgramRepository | None = None,
        cycles: CycleRepository | None = None,
    ) -> None:
        self._repo = repository or ProgramRepository()
        self._cycles = cycles or CycleRepository()

    def get_program(self, session: Session, program_id: int) -> Program:
        program = self._repo.get_by_id(session, program_id)
        if program is None:
            raise NotFoundError(message="Program not found")
        return program

    def create_program(self, session: Session, name: str | None, description: str | None = None) -> Program:
        name = (name or "").strip()
        if not name:
            raise ValidationError(message="Program name is required")

        program = self._repo.create(session, name=name, description=description or None)
        logger.info("Created program %s (%r)", program.id, program.name)
        return program

    def list_programs(self, session: Session, paging: PageRequest, search: str = "") -> Page:
        programs, total = self._repo.list_page(
            session,
            search=search,
            offset=paging.offset,
            limit=paging.limit,
        )
        counts = self._repo.cycle_counts(session, [p.id for p in programs])
        items = [ProgramSummary(program=p, cycle_count=counts.get(p.id, 0)) for p in programs]
        return Page(items=items, total_count=total, request=paging)

    def toggle_program_status(self, session: Session, program_id: int) -> Program:
        program = self.get_program(session, program_id)
        program.is_active = not program.is_active
        session.flush()
        logger.info("Program %s is now %s", program.id, "active" if program.is_active else "inactive")
        return program

    def get_program_details(self, session: Session, program_id: int) -> ProgramDetails:
        program = self.get_program(session, program_id)
        return ProgramDetails(
            program=program,
            recent_cycles=self._cycles.recent_for_program(session, program.id, limit=RECENT_CYCLES),
            cycle_count=self._cycles.count_for_program(session, program.id),
        )
