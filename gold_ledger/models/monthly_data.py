"""Monthly bucket ORM model: payments and winners are recorded per (cycle, month, year)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, SmallInteger, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gold_ledger.models.base import Base, CreatedAtMixin

if TYPE_CHECKING:
    from gold_ledger.models.cycle import Cycle
    from gold_ledger.models.payment import Payment
    from gold_ledger.models.winner import Winner


class MonthlyData(CreatedAtMixin, Base):
    __tablename__ = "gold_monthly_data"
    __table_args__ = (UniqueConstraint("cycle_id", "month", "year", name="uq_gold_monthly_data_period"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    cycle_id: Mapped[int] = mapped_column(Integer, ForeignKey("gold_cycles.id"), nullable=False, index=True)
    month: Mapped[int] = mapped_column(SmallInteger, nullable=False)  # 1..12
    year: Mapped[int] = mapped_column(SmallInteger, nullable=False)

    cycle: Mapped["Cycle"] = relationship(back_populates="monthly_data")
    payments: Mapped[list["Payment"]] = relationship(back_populates="monthly_data")
    winners: Mapped[list["Winner"]] = relationship(back_populates="monthly_data")
