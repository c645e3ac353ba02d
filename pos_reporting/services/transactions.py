"""Date-ranged transaction query against the ``pos_order`` table."""
from __future__ import annotations

import logging

from sqlalchemy import bindparam, func, literal_column, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql import Select

from pos_reporting.core.errors import QueryExecutionError
from pos_reporting.models import REPORTABLE_STATES, PosOrder
from pos_reporting.obs import TRANSACTIONS_RETURNED_COUNTER
from pos_reporting.schemas import FormattedTransaction, RawTransactionRow
from pos_reporting.services.date_range import DateRange
from pos_reporting.services.formatter import TransactionFormatter

logger = logging.getLogger(__name__)


def build_transactions_query() -> Select:
    """Select completed orders with ``date(date_order)`` between ``:start`` and ``date(:end)``.

    Only the end bound is cast explicitly; the start bound is compared as given.
    """
    return (
        select(
            PosOrder.name.label("receipt_check_number"),
            PosOrder.id.label("transaction_unique_id"),
            PosOrder.date_order.label("transaction_datetime"),
            PosOrder.amount_total.label("transaction_gross"),
            PosOrder.amount_tax.label("transaction_tax"),
            (PosOrder.amount_total - PosOrder.amount_tax).label("calculated_net"),
            literal_column("0.00").label("transaction_service_charge"),
        )
        .where(PosOrder.state.in_(REPORTABLE_STATES))
        .where(
            func.date(PosOrder.date_order).between(
                bindparam("start_date"),
                func.date(bindparam("end_date")),
            )
        )
        .order_by(PosOrder.date_order.asc())
    )


TRANSACTIONS_QUERY = build_transactions_query()


class TransactionRepository:
    """Runs the transactions query on one pooled connection per call."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def fetch(self, date_range: DateRange) -> list[RawTransactionRow]:
        try:
            with self._engine.connect() as connection:
                result = connection.execute(
                    TRANSACTIONS_QUERY,
                    {"start_date": date_range.start, "end_date": date_range.end},
                )
                return [RawTransactionRow.from_mapping(row) for row in result.mappings()]
        except SQLAlchemyError as exc:
            logger.exception(
                "transactions query failed for %s..%s", date_range.start, date_range.end
            )
            raise QueryExecutionError() from exc


class TransactionService:
    """Fetches raw rows for a date range and formats them in query order."""

    def __init__(self, repository: TransactionRepository, formatter: TransactionFormatter) -> None:
        self._repository = repository
        self._formatter = formatter

    def list_transactions(self, date_range: DateRange) -> list[FormattedTransaction]:
        rows = self._repository.fetch(date_range)
        try:
            transactions = self._formatter.format_all(rows)
        except (ArithmeticError, TypeError, ValueError) as exc:  # includes TransactionFormatError
            logger.error("could not format transactions for %s..%s: %s", date_range.start, date_range.end, exc)
            raise QueryExecutionError() from exc
        TRANSACTIONS_RETURNED_COUNTER.inc(len(transactions))
        logger.info(
            "returning %d transactions for %s..%s", len(transactions), date_range.start, date_range.end
        )
        return transactions


__all__ = [
    "TRANSACTIONS_QUERY",
    "TransactionRepository",
    "TransactionService",
    "build_transactions_query",
]
