"""SQLAlchemy engine and connection-pool management."""
from __future__ import annotations

import logging
from functools import lru_cache

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, ExceptionContext, make_url

from pos_reporting.core.config import Settings, get_settings
from pos_reporting.obs import instrument_sqlalchemy_engine

logger = logging.getLogger(__name__)


def _log_driver_error(context: ExceptionContext) -> None:
    logger.error(
        "database error (disconnect=%s): %s",
        context.is_disconnect,
        context.original_exception,
    )


def create_db_engine(settings: Settings) -> Engine:
    """Build the process-wide engine with an error listener attached."""
    connect_args: dict[str, object] = {}
    url = make_url(settings.sqlalchemy_url())
    if url.get_backend_name() == "postgresql":
        connect_args["connect_timeout"] = settings.pg_connect_timeout_seconds
    engine = create_engine(url, pool_pre_ping=True, connect_args=connect_args)
    event.listen(engine, "handle_error", _log_driver_error)
    if settings.enable_tracing:
        instrument_sqlalchemy_engine(engine)
    return engine


@lru_cache
def get_engine() -> Engine:
    """Return the shared engine, creating it on first use."""
    return create_db_engine(get_settings())


__all__ = ["create_db_engine", "get_engine"]
