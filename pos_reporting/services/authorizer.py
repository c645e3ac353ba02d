"""Bearer-token verification gate for the transactions endpoint."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from jose import JWTError, jwt  # type: ignore[import-untyped]
from jose.exceptions import ExpiredSignatureError  # type: ignore[import-untyped]
from pydantic import BaseModel, ConfigDict, ValidationError

from pos_reporting.core.config import Settings
from pos_reporting.core.errors import (
    AuthorizationError,
    ConfigurationError,
    InvalidOrExpiredCredential,
    MalformedCredential,
    MissingCredential,
)
from pos_reporting.obs import record_authorization_failure

logger = logging.getLogger(__name__)

BEARER_SCHEME = "Bearer"


class TokenClaims(BaseModel):
    """Decoded claims of a verified token; unknown claims are kept."""

    model_config = ConfigDict(extra="allow")

    sub: str | None = None
    name: str | None = None
    exp: datetime | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.sub or "unknown"


class Authorizer:
    """Verifies ``Authorization: Bearer <token>`` headers against a shared secret."""

    def __init__(self, secret: str, *, algorithm: str = "HS256") -> None:
        self._secret = secret
        self._algorithm = algorithm

    @classmethod
    def from_settings(cls, settings: Settings) -> "Authorizer":
        if not settings.jwt_secret:
            logger.error("authorization is enabled but JWT_SECRET is not set")
            raise ConfigurationError()
        return cls(settings.jwt_secret, algorithm=settings.jwt_algorithm)

    def verify(self, header_value: str | None) -> TokenClaims:
        """Return the claims of a valid bearer token or raise an :class:`AuthorizationError`."""
        try:
            return self._verify(header_value)
        except AuthorizationError as exc:
            record_authorization_failure(type(exc).__name__)
            raise

    def _verify(self, header_value: str | None) -> TokenClaims:
        token = self._extract_token(header_value)
        try:
            payload: dict[str, Any] = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except ExpiredSignatureError as exc:
            logger.warning("token rejected: expired")
            raise InvalidOrExpiredCredential() from exc
        except JWTError as exc:
            logger.warning("token rejected: %s", exc)
            raise InvalidOrExpiredCredential() from exc
        try:
            claims = TokenClaims(**payload)
        except ValidationError as exc:
            logger.warning("token rejected: unexpected claim types")
            raise InvalidOrExpiredCredential() from exc
        logger.info("token verified for %s", claims.display_name)
        return claims

    @staticmethod
    def _extract_token(header_value: str | None) -> str:
        if not header_value or not header_value.strip():
            logger.warning("token rejected: authorization header missing")
            raise MissingCredential()
        parts = header_value.split()
        if len(parts) != 2 or parts[0] != BEARER_SCHEME:
            logger.warning("token rejected: malformed authorization header")
            raise MalformedCredential()
        return parts[1]


__all__ = ["Authorizer", "BEARER_SCHEME", "TokenClaims"]
