"""Load a few demo ``pos_order`` rows into a local database.

Intended for a throwaway PostgreSQL or SQLite database; it creates the
``pos_order`` table if it is missing and never touches existing ids.
"""
from __future__ import annotations

import logging
import sys
from datetime import datetime, timedelta
from decimal import Decimal
from pathlib import Path

from sqlalchemy.orm import Session

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from pos_reporting.db.session import get_engine
from pos_reporting.models import Base, PosOrder

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEMO_STATES = ("paid", "done", "invoiced", "draft", "cancel")


def seed(session: Session, *, start: datetime, days: int = 7) -> int:
    """Insert one order per state per day starting at ``start``; return rows added."""

    existing = {order_id for (order_id,) in session.query(PosOrder.id)}
    added = 0
    next_id = max(existing, default=0) + 1
    for day in range(days):
        for offset, state in enumerate(DEMO_STATES):
            placed_at = start + timedelta(days=day, hours=9 + offset, minutes=7 * offset)
            total = Decimal("10.00") * (offset + 1) + Decimal(day)
            tax = (total * Decimal("0.08")).quantize(Decimal("0.01"))
            session.add(
                PosOrder(
                    id=next_id,
                    name=f"Main/{next_id:05d}",
                    date_order=placed_at,
                    amount_total=total,
                    amount_tax=tax,
                    state=state,
                )
            )
            next_id += 1
            added += 1
    return added


def main() -> None:
    engine = get_engine()
    Base.metadata.create_all(bind=engine)
    with Session(engine) as session:
        added = seed(session, start=datetime.now().replace(hour=0, minute=0, second=0, microsecond=0))
        session.commit()
    logger.info("Seeded %d pos_order rows", added)


if __name__ == "__main__":
    main()
