"""ORM models package."""
from .base import Base
from .pos_order import REPORTABLE_STATES, PosOrder

__all__ = ["Base", "PosOrder", "REPORTABLE_STATES"]
