"""Service error taxonomy and its HTTP rendering."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class TransactionServiceError(Exception):
    """Base error carrying the HTTP status and the client-facing message."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error: Unknown error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        self.message = message or self.message


class AuthorizationError(TransactionServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED


class MissingCredential(AuthorizationError):
    message = "Authorization header missing."


class MalformedCredential(AuthorizationError):
    message = "Authorization header must be in the format: Bearer <token>."


class InvalidOrExpiredCredential(AuthorizationError):
    message = "Invalid or expired token."


class DateRangeError(TransactionServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class MissingDateRange(DateRangeError):
    message = "Missing start-Date or end-Date query parameters."


class InvalidDateFormat(DateRangeError):
    message = "Dates must be in format YYYY-MM-DD."


class QueryExecutionError(TransactionServiceError):
    message = "Internal server error: Failed to retrieve transactions from database."


class MethodNotAllowed(TransactionServiceError):
    status_code = status.HTTP_405_METHOD_NOT_ALLOWED
    message = "Method not allowed."


class UnknownInternalError(TransactionServiceError):
    pass


class ConfigurationError(UnknownInternalError):
    message = "Internal server error: Token verification is not configured."


def error_body(error: TransactionServiceError) -> dict[str, str]:
    return {"message": error.message}


def unhandled_error_response(exc: Exception) -> JSONResponse:
    """Render an exception outside the taxonomy as the generic 500 body."""
    error = UnknownInternalError(f"Internal server error: {exc}" if str(exc) else None)
    return JSONResponse(status_code=error.status_code, content=error_body(error))


async def _service_error_handler(request: Request, exc: TransactionServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=error_body(exc))


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return unhandled_error_response(exc)


def register_exception_handlers(application: FastAPI) -> None:
    """Render service errors as ``{"message": ...}`` bodies."""
    application.add_exception_handler(TransactionServiceError, _service_error_handler)
    application.add_exception_handler(Exception, _unhandled_error_handler)


__all__ = [
    "AuthorizationError",
    "ConfigurationError",
    "DateRangeError",
    "InvalidDateFormat",
    "InvalidOrExpiredCredential",
    "MalformedCredential",
    "MethodNotAllowed",
    "MissingCredential",
    "MissingDateRange",
    "QueryExecutionError",
    "TransactionServiceError",
    "UnknownInternalError",
    "error_body",
    "register_exception_handlers",
    "unhandled_error_response",
]
