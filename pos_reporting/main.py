"""FastAPI application entrypoint."""
from __future__ import annotations

from functools import lru_cache

from fastapi import FastAPI
from sqlalchemy.engine import Engine

from pos_reporting.api.routes import register_routes
from pos_reporting.core.config import Settings, get_settings
from pos_reporting.core.errors import register_exception_handlers
from pos_reporting.core.logging import configure_logging
from pos_reporting.db.session import create_db_engine, get_engine
from pos_reporting.obs import (
    AccessLogMiddleware,
    PrometheusMiddleware,
    initialise_tracing,
    instrument_fastapi_app,
    metrics_router,
)


def _bind_settings(application: FastAPI, settings: Settings) -> None:
    """Make routes, the auth gate and the engine use ``settings`` instead of the environment."""

    @lru_cache(maxsize=1)
    def engine_for_settings() -> Engine:
        return create_db_engine(settings)

    application.dependency_overrides[get_settings] = lambda: settings
    application.dependency_overrides[get_engine] = engine_for_settings


def create_application(settings: Settings | None = None) -> FastAPI:
    """Application factory used by ASGI servers and tests."""
    explicit_settings = settings is not None
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    if settings.enable_tracing:
        initialise_tracing(service_name=settings.app_name, endpoint=settings.otel_exporter_endpoint)

    application = FastAPI(
        title=settings.app_name,
        version=settings.version,
        docs_url=settings.docs_url,
        redoc_url=settings.redoc_url,
        openapi_url=settings.openapi_url,
    )
    if explicit_settings:
        _bind_settings(application, settings)

    application.add_middleware(AccessLogMiddleware)
    if settings.enable_metrics:
        application.add_middleware(PrometheusMiddleware)
        application.include_router(metrics_router)
    register_exception_handlers(application)
    register_routes(application)

    if settings.enable_tracing:
        instrument_fastapi_app(application)

    return application


app = create_application()
