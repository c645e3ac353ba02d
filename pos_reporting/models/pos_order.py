"""Point-of-sale order table owned by the upstream POS database."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from pos_reporting.models.base import Base

# Order lifecycle states that represent a completed sale.
REPORTABLE_STATES: tuple[str, ...] = ("paid", "done", "invoiced")


class PosOrder(Base):
    """Read-only mapping of the columns the transactions report depends on."""

    __tablename__ = "pos_order"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str | None] = mapped_column(String(64))
    date_order: Mapped[datetime | None] = mapped_column(DateTime)
    amount_total: Mapped[Decimal | None] = mapped_column(Numeric(16, 2))
    amount_tax: Mapped[Decimal | None] = mapped_column(Numeric(16, 2))
    state: Mapped[str] = mapped_column(String(32), nullable=False)


__all__ = ["PosOrder", "REPORTABLE_STATES"]
