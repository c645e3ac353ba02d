"""Mapping of raw ``pos_order`` rows to the published transaction records."""
from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

from pos_reporting.core.config import DiscountStrategy, NullHandling, Settings
from pos_reporting.schemas import FormattedTransaction, RawTransactionRow
from pos_reporting.schemas.transaction import Numeric

_CENTS = Decimal("0.01")


class TransactionFormatError(ValueError):
    """Raised when a row cannot be published: a null field in strict mode or a non-finite amount."""


def round_currency(value: Numeric) -> float:
    """Round to two decimals, halves away from zero, and return a float.

    The value goes through ``float`` first so that the result matches what a
    client would get from rounding the same binary number. NaN and infinities
    have no JSON representation and raise ``TransactionFormatError``.
    """
    as_float = float(value)
    if not math.isfinite(as_float):
        raise TransactionFormatError(f"amount {value!r} is not a finite number")
    rounded = float(Decimal(repr(as_float)).quantize(_CENTS, rounding=ROUND_HALF_UP))
    # collapse -0.0
    return rounded or 0.0


def iso_instant(value: datetime) -> str:
    """Format ``value`` as a UTC ISO-8601 instant with millisecond precision."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return f"{value:%Y-%m-%dT%H:%M:%S}.{value.microsecond // 1000:03d}Z"


class TransactionFormatter:
    """Turns :class:`RawTransactionRow` values into :class:`FormattedTransaction`.

    ``discount_strategy`` selects between a fixed ``0.00`` discount and the
    residual ``gross - net - tax - service_charge``. ``null_handling`` decides
    whether null fields become zero/empty values or fail the row.
    """

    def __init__(
        self,
        *,
        discount_strategy: DiscountStrategy = DiscountStrategy.DERIVED,
        null_handling: NullHandling = NullHandling.TOLERANT,
    ) -> None:
        self._discount_strategy = discount_strategy
        self._null_handling = null_handling

    @classmethod
    def from_settings(cls, settings: Settings) -> "TransactionFormatter":
        return cls(discount_strategy=settings.discount_strategy, null_handling=settings.null_handling)

    @property
    def strict(self) -> bool:
        return self._null_handling is NullHandling.STRICT

    def format(self, row: RawTransactionRow) -> FormattedTransaction:
        gross = self._amount(row.transaction_gross, "transaction_gross")
        tax = self._amount(row.transaction_tax, "transaction_tax")
        service_charge = self._amount(row.transaction_service_charge, "transaction_service_charge")
        net = round_currency(self._amount(row.calculated_net, "calculated_net") - service_charge)

        if self._discount_strategy is DiscountStrategy.DERIVED:
            discount = round_currency(gross - net - tax - service_charge)
        else:
            discount = 0.0

        transaction_date, transaction_time = self._split_timestamp(row.transaction_datetime)
        return FormattedTransaction(
            receipt_check_number=self._text(row.receipt_check_number),
            transaction_unique_id=self._text(row.transaction_unique_id),
            transaction_date=transaction_date,
            transaction_time=transaction_time,
            transaction_gross=gross,
            transaction_net=net,
            transaction_tax=tax,
            transaction_service_charge=service_charge,
            transaction_discount=discount,
        )

    def format_all(self, rows: Iterable[RawTransactionRow]) -> list[FormattedTransaction]:
        return [self.format(row) for row in rows]

    def _amount(self, value: Numeric, field: str) -> float:
        if value is None:
            if self.strict:
                raise TransactionFormatError(f"{field} is null")
            value = 0
        return round_currency(value)

    def _split_timestamp(self, value: datetime | str | None) -> tuple[str, str]:
        if value is None:
            if self.strict:
                raise TransactionFormatError("transaction_datetime is null")
            return "", ""
        if isinstance(value, str):
            value = datetime.fromisoformat(value)
        date_part, _, time_part = iso_instant(value).partition("T")
        return date_part, time_part.removesuffix("Z")

    @staticmethod
    def _text(value: object) -> str:
        return "" if value is None else str(value)


__all__ = ["TransactionFormatError", "TransactionFormatter", "iso_instant", "round_currency"]
