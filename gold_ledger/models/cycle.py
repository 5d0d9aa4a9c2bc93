"""Program cycle ORM model.

A program runs one cycle at a time; the partial unique index rejects a second
active cycle for the same program at the storage layer.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gold_ledger.models.base import Base, CreatedAtMixin, utcnow

if TYPE_CHECKING:
    from gold_ledger.models.lot import Lot
    from gold_ledger.models.monthly_data import MonthlyData
    from gold_ledger.models.program import Program


class Cycle(CreatedAtMixin, Base):
    """One time-bounded run of a program."""

    __tablename__ = "gold_cycles"
    __table_args__ = (
        Index(
            "uq_gold_cycles_active_program",
            "program_id",
            unique=True,
            sqlite_where=text("is_active"),
            postgresql_where=text("is_active"),
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    program_id: Mapped[int] = mapped_column(Integer, ForeignKey("gold_programs.id"), nullable=False, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    program: Mapped["Program"] = relationship(back_populates="cycles", foreign_keys=[program_id])
    lots: Mapped[list["Lot"]] = relationship(back_populates="cycle")
    monthly_data: Mapped[list["MonthlyData"]] = relationship(back_populates="cycle")
