"""Pydantic schemas package."""

from .transaction import ErrorResponse, FormattedTransaction, RawTransactionRow

__all__ = ["ErrorResponse", "FormattedTransaction", "RawTransactionRow"]
