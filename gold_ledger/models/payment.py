"""Payment ORM model: paid/unpaid flag for one lot within one monthly bucket."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gold_ledger.models.base import Base, CreatedAtMixin

if TYPE_CHECKING:
    from gold_ledger.models.lot import Lot
    from gold_ledger.models.monthly_data import MonthlyData


class Payment(CreatedAtMixin, Base):
    __tablename__ = "gold_payments"
    __table_args__ = (UniqueConstraint("monthly_data_id", "lot_id", name="uq_gold_payments_bucket_lot"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    monthly_data_id: Mapped[int] = mapped_column(Integer, ForeignKey("gold_monthly_data.id"), nullable=False, index=True)
    lot_id: Mapped[int] = mapped_column(Integer, ForeignKey("gold_lots.id"), nullable=False, index=True)
    is_paid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    payment_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    monthly_data: Mapped["MonthlyData"] = relationship(back_populates="payments")
    lot: Mapped["Lot"] = relationship()
