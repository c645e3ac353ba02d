"""Common dependencies for API routes."""
from __future__ import annotations

from fastapi import Depends, Header, Request
from sqlalchemy.engine import Engine

from pos_reporting.core.config import Settings, get_settings
from pos_reporting.db.session import get_engine
from pos_reporting.services.authorizer import Authorizer, TokenClaims
from pos_reporting.services.formatter import TransactionFormatter
from pos_reporting.services.transactions import TransactionRepository, TransactionService


def get_authorizer(settings: Settings = Depends(get_settings)) -> Authorizer | None:
    """Return the token gate, or ``None`` when the deployment runs without one."""
    if not settings.auth_enabled:
        return None
    return Authorizer.from_settings(settings)


def require_authorization(
    request: Request,
    authorization: str | None = Header(default=None),
    authorizer: Authorizer | None = Depends(get_authorizer),
) -> TokenClaims | None:
    if authorizer is None:
        return None
    claims = authorizer.verify(authorization)
    request.state.actor = claims.display_name
    return claims


def get_transaction_service(
    settings: Settings = Depends(get_settings),
    engine: Engine = Depends(get_engine),
) -> TransactionService:
    return TransactionService(
        TransactionRepository(engine),
        TransactionFormatter.from_settings(settings),
    )


__all__ = ["get_authorizer", "get_transaction_service", "require_authorization"]
