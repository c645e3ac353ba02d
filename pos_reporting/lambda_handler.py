"""AWS Lambda entry point for API Gateway proxy events and direct invocations.

Runs the same gate, date validation, query and formatter as the HTTP route and
returns a proxy-integration response dict.
"""
from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from pos_reporting.core.config import Settings, get_settings
from pos_reporting.core.errors import (
    MethodNotAllowed,
    TransactionServiceError,
    UnknownInternalError,
    error_body,
)
from pos_reporting.core.logging import configure_logging
from pos_reporting.db.session import get_engine
from pos_reporting.obs import span_from_traceparent
from pos_reporting.services.authorizer import Authorizer
from pos_reporting.services.date_range import parse_date_range
from pos_reporting.services.formatter import TransactionFormatter
from pos_reporting.services.transactions import TransactionRepository, TransactionService

logger = logging.getLogger(__name__)

_JSON_HEADERS = {"Content-Type": "application/json"}


def _response(status_code: int, body: Any) -> dict[str, Any]:
    return {"statusCode": status_code, "headers": dict(_JSON_HEADERS), "body": json.dumps(body)}


def _header(headers: Mapping[str, str] | None, name: str) -> str | None:
    for key, value in (headers or {}).items():
        if key.lower() == name.lower():
            return value
    return None


def _query_params(event: Mapping[str, Any]) -> Mapping[str, Any]:
    params = event.get("queryStringParameters")
    if params is None and "headers" not in event:
        # direct invocation with the dates at the top level
        return event
    return params or {}


def _request_path(event: Mapping[str, Any]) -> str:
    return event.get("rawPath") or event.get("path") or "/transactions"


def _request_method(event: Mapping[str, Any]) -> str | None:
    """Return the HTTP method of a proxy event, or ``None`` for a direct invocation."""
    method = event.get("httpMethod") or event.get("requestContext", {}).get("http", {}).get("method")
    return method.upper() if method else None


def handle_event(event: Mapping[str, Any], *, settings: Settings, service: TransactionService) -> dict[str, Any]:
    if _request_method(event) not in (None, "GET"):
        return _response(MethodNotAllowed.status_code, error_body(MethodNotAllowed()))
    if _request_path(event) == "/":
        return _response(200, {"status": "ok", "service": settings.app_name})

    headers = event.get("headers")
    try:
        if settings.auth_enabled:
            Authorizer.from_settings(settings).verify(_header(headers, "Authorization"))
        date_range = parse_date_range(_query_params(event))
        with span_from_traceparent(
            "transactions.list",
            _header(headers, "traceparent"),
            start_date=date_range.start,
            end_date=date_range.end,
        ):
            transactions = service.list_transactions(date_range)
    except TransactionServiceError as exc:
        return _response(exc.status_code, error_body(exc))
    except Exception as exc:
        logger.exception("handler error")
        error = UnknownInternalError(f"Internal server error: {exc}" if str(exc) else None)
        return _response(error.status_code, error_body(error))
    return _response(200, [transaction.to_payload() for transaction in transactions])


_logging_configured = False


def _configure_logging_once(level: str) -> None:
    # warm containers reuse the module; dictConfig must not run per invocation
    global _logging_configured
    if not _logging_configured:
        configure_logging(level)
        _logging_configured = True


def handler(event: Mapping[str, Any], context: Any) -> dict[str, Any]:
    """Lambda handler configured from the environment."""
    settings = get_settings()
    _configure_logging_once(settings.log_level)
    service = TransactionService(
        TransactionRepository(get_engine()),
        TransactionFormatter.from_settings(settings),
    )
    return handle_event(event, settings=settings, service=service)


__all__ = ["handle_event", "handler"]
