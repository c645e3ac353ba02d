"""Observability utilities."""

from .access_log import REQUEST_ID_HEADER, AccessLogMiddleware, AccessLogRecord
from .metrics import (
    AUTHORIZATION_FAILURE_COUNTER,
    REQUEST_COUNTER,
    REQUEST_ERROR_COUNTER,
    REQUEST_LATENCY_SECONDS,
    TRANSACTIONS_RETURNED_COUNTER,
    PrometheusMiddleware,
    metrics_router,
    record_authorization_failure,
)
from .tracing import (
    initialise_tracing,
    instrument_fastapi_app,
    instrument_sqlalchemy_engine,
    span_from_traceparent,
)

__all__ = [
    "AUTHORIZATION_FAILURE_COUNTER",
    "AccessLogMiddleware",
    "AccessLogRecord",
    "PrometheusMiddleware",
    "REQUEST_COUNTER",
    "REQUEST_ERROR_COUNTER",
    "REQUEST_ID_HEADER",
    "REQUEST_LATENCY_SECONDS",
    "TRANSACTIONS_RETURNED_COUNTER",
    "initialise_tracing",
    "instrument_fastapi_app",
    "instrument_sqlalchemy_engine",
    "metrics_router",
    "record_authorization_failure",
    "span_from_traceparent",
]
