"""Gold investment program ORM model."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gold_ledger.models.base import Base, CreatedAtMixin

if TYPE_CHECKING:
    from gold_ledger.models.cycle import Cycle


class Program(CreatedAtMixin, Base):
    """A named, independently activatable investment scheme."""

    __tablename__ = "gold_programs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # programs <-> cycles reference each other; the FK is added after both tables exist.
    current_cycle_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("gold_cycles.id", use_alter=True, name="fk_gold_programs_current_cycle"),
        nullable=True,
    )

    cycles: Mapped[list["Cycle"]] = relationship(
        back_populates="program",
        foreign_keys="Cycle.program_id",
    )
