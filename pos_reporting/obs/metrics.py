"""Prometheus metrics for the transactions service.

Request series are labelled by route template rather than by URL path.
"""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

from fastapi import APIRouter, Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_LATENCY_SECONDS = Histogram(
    "http_request_latency_seconds",
    "Latency of HTTP requests in seconds.",
    labelnames=("method", "path"),
)
REQUEST_COUNTER = Counter(
    "http_requests_total",
    "Total number of HTTP requests processed.",
    labelnames=("method", "path", "status"),
)
REQUEST_ERROR_COUNTER = Counter(
    "http_request_errors_total",
    "Total number of HTTP requests that resulted in server errors.",
    labelnames=("method", "path", "status"),
)
TRANSACTIONS_RETURNED_COUNTER = Counter(
    "transactions_returned_total",
    "Count of formatted transactions returned to callers.",
)
AUTHORIZATION_FAILURE_COUNTER = Counter(
    "authorization_failures_total",
    "Count of requests rejected by the bearer-token gate.",
    labelnames=("reason",),
)


UNMATCHED_ROUTE = "unmatched"
_KNOWN_METHODS = frozenset({"GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"})


def route_label(request: Request) -> str:
    """Return the template of the route that handled ``request``.

    Requests that matched no route share the ``unmatched`` label.
    """
    route = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_ROUTE


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Counts and times requests per method, route template and status."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:  # type: ignore[override]
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            self._observe(request, 500, time.perf_counter() - started)
            raise
        self._observe(request, response.status_code, time.perf_counter() - started)
        return response

    @staticmethod
    def _observe(request: Request, status_code: int, elapsed: float) -> None:
        method = request.method if request.method in _KNOWN_METHODS else "OTHER"
        labels = {"method": method, "path": route_label(request)}
        REQUEST_LATENCY_SECONDS.labels(**labels).observe(elapsed)
        REQUEST_COUNTER.labels(status=str(status_code), **labels).inc()
        if status_code >= 500:
            REQUEST_ERROR_COUNTER.labels(status=str(status_code), **labels).inc()


metrics_router = APIRouter(tags=["observability"])


@metrics_router.get("/metrics", include_in_schema=False)
def metrics_endpoint() -> Response:
    """Expose Prometheus metrics for scraping."""
    payload = generate_latest()
    return Response(content=payload, media_type=CONTENT_TYPE_LATEST)


def record_authorization_failure(reason: str) -> None:
    AUTHORIZATION_FAILURE_COUNTER.labels(reason=reason).inc()


__all__ = [
    "AUTHORIZATION_FAILURE_COUNTER",
    "PrometheusMiddleware",
    "REQUEST_COUNTER",
    "REQUEST_ERROR_COUNTER",
    "REQUEST_LATENCY_SECONDS",
    "TRANSACTIONS_RETURNED_COUNTER",
    "UNMATCHED_ROUTE",
    "metrics_endpoint",
    "metrics_router",
    "record_authorization_failure",
    "route_label",
]
