"""Schemas for raw order rows and the formatted transaction contract."""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

Numeric = Decimal | float | int | str | None


@dataclass(frozen=True, slots=True)
class RawTransactionRow:
    """One ``pos_order`` row as selected by the transactions query."""

    receipt_check_number: Any
    transaction_unique_id: Any
    transaction_datetime: datetime | None
    transaction_gross: Numeric
    transaction_tax: Numeric
    calculated_net: Numeric
    transaction_service_charge: Numeric

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "RawTransactionRow":
        return cls(
            receipt_check_number=row.get("receipt_check_number"),
            transaction_unique_id=row.get("transaction_unique_id"),
            transaction_datetime=row.get("transaction_datetime"),
            transaction_gross=row.get("transaction_gross"),
            transaction_tax=row.get("transaction_tax"),
            calculated_net=row.get("calculated_net"),
            transaction_service_charge=row.get("transaction_service_charge"),
        )


class FormattedTransaction(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    receipt_check_number: str = Field(alias="Receipt/Check_Number")
    transaction_unique_id: str = Field(alias="Transaction_Unique_Id")
    transaction_date: str = Field(alias="Transaction_Date")
    transaction_time: str = Field(alias="Transaction_Time")
    transaction_gross: float = Field(alias="Transaction_Gross")
    transaction_net: float = Field(alias="Transaction_Net")
    transaction_tax: float = Field(alias="Transaction_Tax")
    transaction_service_charge: float = Field(alias="Transaction_Service_Charge")
    transaction_discount: float = Field(alias="Transaction_Discount")

    def to_payload(self) -> dict[str, Any]:
        """Return the external record shape keyed by the published field names."""
        return self.model_dump(by_alias=True)


class ErrorResponse(BaseModel):
    message: str


__all__ = ["ErrorResponse", "FormattedTransaction", "Numeric", "RawTransactionRow"]
