"""Per-request access log middleware."""
from __future__ import annotations

import json
import logging
import time
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Callable
from uuid import uuid4

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp

from pos_reporting.core.errors import unhandled_error_response

REQUEST_ID_HEADER = "X-Request-ID"


@dataclass(slots=True)
class AccessLogRecord:
    """Structured log entry emitted once per request."""

    timestamp: str
    request_id: str
    method: str
    path: str
    status: int
    duration_ms: float
    actor: str | None
    query: dict[str, str]

    def to_json(self) -> str:
        payload = asdict(self)
        payload["duration_ms"] = round(self.duration_ms, 2)
        return json.dumps(payload, default=str)


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status, latency and the verified subject of each request.

    Exceptions that escape the routes are rendered here as the generic 500 body
    so that failed requests are logged and carry the request id as well.
    """

    def __init__(self, app: ASGIApp, *, logger: logging.Logger | None = None) -> None:
        super().__init__(app)
        self._logger = logger or logging.getLogger("access")

    async def dispatch(self, request: Request, call_next: Callable[[Request], Any]) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        request.state.request_id = request_id
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            self._logger.exception("unhandled error on %s %s [%s]", request.method, request.url.path, request_id)
            response = unhandled_error_response(exc)

        record = AccessLogRecord(
            timestamp=datetime.now(timezone.utc).isoformat(),
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=(time.perf_counter() - start) * 1000,
            actor=getattr(request.state, "actor", None),
            query=dict(request.query_params),
        )
        self._logger.info(record.to_json())

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


__all__ = ["AccessLogMiddleware", "AccessLogRecord", "REQUEST_ID_HEADER"]
