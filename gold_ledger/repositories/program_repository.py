"""Repository layer for program persistence."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from gold_ledger.models.cycle import Cycle
from gold_ledger.models.program import Program


class ProgramRepository:
    """CRUD and listing for Program."""

    def get_by_id(self, session: Session, program_id: int) -> Program | None:
        return session.get(Program, program_id)

    def create(self, session: Session, *, name: str, description: str | None) -> Program:
        program = Program(name=name, description=description, is_active=True)
        session.add(program)
        session.flush()
        return program

    def list_page(
        self,
        session: Session,
        *,
        search: str,
        offset: int,
        limit: int,
    ) -> tuple[Sequence[Program], int]:
        """Return one page of programs (newest first) and the total match count."""

        conditions = []
        if search:
            conditions.append(
                or_(
                    Program.name.contains(search, autoescape=True),
                    Program.description.contains(search, autoescape=True),
                )
            )

        stmt = (
            select(Program)
            .where(*conditions)
            .order_by(Program.created_at.desc(), Program.id.desc())
            .offset(offset)
            .limit(limit)
        )
        count_stmt = select(func.count(Program.id)).where(*conditions)

        programs = list(session.scalars(stmt).all())
        total = int(session.scalar(count_stmt) or 0)
        return programs, total

    def cycle_counts(self, session: Session, program_ids: Sequence[int]) -> dict[int, int]:
        if not program_ids:
            return {}
        stmt = (
            select(Cycle.program_id, func.count(Cycle.id))
            .where(Cycle.program_id.in_(program_ids))
            .group_by(Cycle.program_id)
        )
        return {int(pid): int(n) for pid, n in session.execute(stmt).all()}
