"""Winner ORM model.

A lot wins a monthly bucket at most once; a removed winner can be re-added.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gold_ledger.models.base import Base, CreatedAtMixin

if TYPE_CHECKING:
    from gold_ledger.models.lot import Lot
    from gold_ledger.models.monthly_data import MonthlyData


class Winner(CreatedAtMixin, Base):
    __tablename__ = "gold_winners"
    __table_args__ = (UniqueConstraint("monthly_data_id", "lot_id", name="uq_gold_winners_bucket_lot"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    monthly_data_id: Mapped[int] = mapped_column(Integer, ForeignKey("gold_monthly_data.id"), nullable=False, index=True)
    lot_id: Mapped[int] = mapped_column(Integer, ForeignKey("gold_lots.id"), nullable=False, index=True)

    monthly_data: Mapped["MonthlyData"] = relationship(back_populates="winners")
    lot: Mapped["Lot"] = relationship()
