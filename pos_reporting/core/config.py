"""Configuration management for the transactions service."""
from __future__ import annotations

import enum
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class DiscountStrategy(str, enum.Enum):
    DERIVED = "derived"
    FIXED = "fixed"


class NullHandling(str, enum.Enum):
    TOLERANT = "tolerant"
    STRICT = "strict"


class Settings(BaseSettings):
    app_name: str = Field(default="transactions-service")
    version: str = Field(default="0.1.0")
    docs_url: str | None = Field(default="/docs")
    redoc_url: str | None = Field(default="/redoc")
    openapi_url: str = Field(default="/openapi.json")

    port: int = Field(default=3000, description="Listening port for the HTTP server.")
    log_level: str = Field(default="INFO")

    pg_host: str = Field(default="localhost")
    pg_user: str = Field(default="postgres")
    pg_password: str = Field(default="")
    pg_database: str = Field(default="postgres")
    pg_port: int = Field(default=5432)
    pg_connect_timeout_seconds: int = Field(default=5)
    database_url: str | None = Field(
        default=None,
        description="Full SQLAlchemy URL; overrides the PG_* settings when set.",
    )

    auth_enabled: bool = Field(default=True)
    jwt_secret: str | None = Field(default=None)
    jwt_algorithm: str = Field(default="HS256")

    discount_strategy: DiscountStrategy = Field(default=DiscountStrategy.DERIVED)
    null_handling: NullHandling = Field(default=NullHandling.TOLERANT)

    enable_metrics: bool = Field(default=True)
    enable_tracing: bool = Field(default=False)
    otel_exporter_endpoint: str | None = Field(default=None)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)

    def sqlalchemy_url(self) -> str | URL:
        """Return the database URL assembled from the ``PG_*`` settings."""
        if self.database_url:
            return self.database_url
        return URL.create(
            "postgresql+psycopg",
            username=self.pg_user,
            password=self.pg_password or None,
            host=self.pg_host,
            port=self.pg_port,
            database=self.pg_database,
        )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()


__all__ = ["DiscountStrategy", "NullHandling", "Settings", "get_settings"]
