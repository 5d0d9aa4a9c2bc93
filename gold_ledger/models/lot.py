"""Lot ORM model: a member's participation slot within a cycle."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Index, Integer, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gold_ledger.models.base import Base, CreatedAtMixin

if TYPE_CHECKING:
    from gold_ledger.models.cycle import Cycle
    from gold_ledger.models.user import User


class Lot(CreatedAtMixin, Base):
    __tablename__ = "gold_lots"
    __table_args__ = (
        Index(
            "uq_gold_lots_active_cycle_user",
            "cycle_id",
            "user_id",
            unique=True,
            sqlite_where=text("is_active"),
            postgresql_where=text("is_active"),
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    cycle_id: Mapped[int] = mapped_column(Integer, ForeignKey("gold_cycles.id"), nullable=False, index=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    cycle: Mapped["Cycle"] = relationship(back_populates="lots")
    user: Mapped["User"] = relationship(lazy="joined")
