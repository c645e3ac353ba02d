"""Top level API router registration."""
from fastapi import FastAPI

from pos_reporting.api.routes import health, transactions


def register_routes(application: FastAPI) -> None:
    """Register all API routers with the FastAPI application."""
    application.include_router(health.router, tags=["health"])
    application.include_router(transactions.router, tags=["transactions"])


__all__ = ["register_routes"]
