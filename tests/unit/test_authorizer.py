from __future__ import annotations

import logging
from datetime import timedelta

import pytest
from prometheus_client import REGISTRY

from pos_reporting.core.config import Settings
from pos_reporting.core.errors import (
    ConfigurationError,
    InvalidOrExpiredCredential,
    MalformedCredential,
    MissingCredential,
)
from pos_reporting.services.authorizer import Authorizer
from tests.conftest import JWT_SECRET, make_token


@pytest.fixture()
def authorizer() -> Authorizer:
    return Authorizer(JWT_SECRET)


def _failures(reason: str) -> float:
    return REGISTRY.get_sample_value("authorization_failures_total", {"reason": reason}) or 0.0


def test_valid_token_returns_claims(authorizer: Authorizer, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="pos_reporting.services.authorizer"):
        claims = authorizer.verify(f"Bearer {make_token()}")

    assert claims.sub == "cashier@example.com"
    assert claims.display_name == "Front Cashier"
    assert "token verified for Front Cashier" in caplog.text


def test_display_name_falls_back_to_subject(authorizer: Authorizer) -> None:
    claims = authorizer.verify(f"Bearer {make_token(name=None)}")

    assert claims.display_name == "cashier@example.com"


@pytest.mark.parametrize("header", [None, "", "   "])
def test_missing_header(authorizer: Authorizer, header: str | None) -> None:
    before = _failures("MissingCredential")

    with pytest.raises(MissingCredential) as excinfo:
        authorizer.verify(header)

    assert excinfo.value.status_code == 401
    assert _failures("MissingCredential") == before + 1


@pytest.mark.parametrize("header", ["Bearer", "Basic dXNlcjpwYXNz", "Bearer a b", "bearer-token"])
def test_malformed_header(authorizer: Authorizer, header: str) -> None:
    with pytest.raises(MalformedCredential):
        authorizer.verify(header)


def test_expired_token(authorizer: Authorizer, caplog: pytest.LogCaptureFixture) -> None:
    token = make_token(expires_in=timedelta(seconds=-30))

    with caplog.at_level(logging.WARNING, logger="pos_reporting.services.authorizer"):
        with pytest.raises(InvalidOrExpiredCredential):
            authorizer.verify(f"Bearer {token}")

    assert "expired" in caplog.text


@pytest.mark.parametrize("token", [make_token(secret="wrong-secret"), "not-a-jwt"])
def test_bad_signature_or_garbage(authorizer: Authorizer, token: str) -> None:
    with pytest.raises(InvalidOrExpiredCredential):
        authorizer.verify(f"Bearer {token}")


def test_algorithm_mismatch_is_rejected() -> None:
    strict = Authorizer(JWT_SECRET, algorithm="HS512")

    with pytest.raises(InvalidOrExpiredCredential):
        strict.verify(f"Bearer {make_token()}")


def test_from_settings_requires_secret() -> None:
    with pytest.raises(ConfigurationError):
        Authorizer.from_settings(Settings(_env_file=None, jwt_secret=None))
