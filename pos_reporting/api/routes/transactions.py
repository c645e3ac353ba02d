"""Transaction read route."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from pos_reporting.api.deps import get_transaction_service, require_authorization
from pos_reporting.schemas import ErrorResponse, FormattedTransaction
from pos_reporting.services.date_range import parse_date_range
from pos_reporting.services.transactions import TransactionService

router = APIRouter()


@router.get(
    "/transactions",
    response_model=list[FormattedTransaction],
    summary="List completed POS transactions for an inclusive date range",
    dependencies=[Depends(require_authorization)],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def list_transactions(
    request: Request,
    service: TransactionService = Depends(get_transaction_service),
) -> list[FormattedTransaction]:
    date_range = parse_date_range(request.query_params)
    return service.list_transactions(date_range)


__all__ = ["list_transactions", "router"]
