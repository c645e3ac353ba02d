from __future__ import annotations

import json

import pytest
from sqlalchemy.engine import Engine

from pos_reporting import lambda_handler
from pos_reporting.core.config import Settings
from pos_reporting.models import PosOrder
from pos_reporting.services.formatter import TransactionFormatter
from pos_reporting.services.transactions import TransactionRepository, TransactionService
from tests.conftest import make_token


@pytest.fixture()
def service(db_engine: Engine, settings: Settings) -> TransactionService:
    return TransactionService(TransactionRepository(db_engine), TransactionFormatter.from_settings(settings))


def _api_gateway_event(params: dict[str, str] | None, headers: dict[str, str] | None = None) -> dict[str, object]:
    return {
        "resource": "/transactions",
        "path": "/transactions",
        "httpMethod": "GET",
        "headers": headers or {},
        "queryStringParameters": params,
    }


def test_proxy_event_returns_formatted_rows(
    settings: Settings, service: TransactionService, sample_orders: list[PosOrder]
) -> None:
    event = _api_gateway_event(
        {"startdate": "2024-03-01", "enddate": "2024-03-02"},
        {"authorization": f"Bearer {make_token()}"},
    )

    response = lambda_handler.handle_event(event, settings=settings, service=service)

    assert response["statusCode"] == 200
    assert response["headers"] == {"Content-Type": "application/json"}
    body = json.loads(response["body"])
    assert [item["Transaction_Unique_Id"] for item in body] == ["1", "2", "3"]
    assert body[0]["Transaction_Net"] == 92.0


def test_proxy_event_without_token_is_rejected(settings: Settings, service: TransactionService) -> None:
    event = _api_gateway_event({"startDate": "2024-03-01", "endDate": "2024-03-02"})

    response = lambda_handler.handle_event(event, settings=settings, service=service)

    assert response["statusCode"] == 401
    assert json.loads(response["body"]) == {"message": "Authorization header missing."}


def test_proxy_event_without_query_string(settings: Settings, service: TransactionService) -> None:
    event = _api_gateway_event(None, {"Authorization": f"Bearer {make_token()}"})

    response = lambda_handler.handle_event(event, settings=settings, service=service)

    assert response["statusCode"] == 400


def test_direct_invocation_payload(
    settings: Settings, service: TransactionService, sample_orders: list[PosOrder]
) -> None:
    public = settings.model_copy(update={"auth_enabled": False})

    response = lambda_handler.handle_event(
        {"start-date": "2024-03-02", "end-date": "2024-03-02"}, settings=public, service=service
    )

    assert response["statusCode"] == 200
    assert [item["Transaction_Unique_Id"] for item in json.loads(response["body"])] == ["3"]


def test_health_path(settings: Settings, service: TransactionService) -> None:
    response = lambda_handler.handle_event({"rawPath": "/", "headers": {}}, settings=settings, service=service)

    assert json.loads(response["body"]) == {"status": "ok", "service": "transactions-service"}


def test_unexpected_error_becomes_500(settings: Settings) -> None:
    class ExplodingService:
        def list_transactions(self, date_range: object) -> list[object]:
            raise RuntimeError("boom")

    public = settings.model_copy(update={"auth_enabled": False})
    response = lambda_handler.handle_event(
        {"startDate": "2024-03-01", "endDate": "2024-03-02"},
        settings=public,
        service=ExplodingService(),  # type: ignore[arg-type]
    )

    assert response["statusCode"] == 500
    assert json.loads(response["body"]) == {"message": "Internal server error: boom"}


def test_handler_builds_service_from_environment(
    monkeypatch: pytest.MonkeyPatch, settings: Settings, db_engine: Engine, sample_orders: list[PosOrder]
) -> None:
    monkeypatch.setattr(lambda_handler, "get_settings", lambda: settings)
    monkeypatch.setattr(lambda_handler, "get_engine", lambda: db_engine)
    event = _api_gateway_event(
        {"startDate": "2024-03-01", "endDate": "2024-03-01"},
        {"Authorization": f"Bearer {make_token()}"},
    )

    response = lambda_handler.handler(event, None)

    assert response["statusCode"] == 200
    assert len(json.loads(response["body"])) == 2


@pytest.mark.parametrize("method", ["POST", "DELETE", "put"])
def test_non_get_proxy_event_returns_405(settings: Settings, service: TransactionService, method: str) -> None:
    event = _api_gateway_event(
        {"startDate": "2024-03-01", "endDate": "2024-03-02"},
        {"Authorization": f"Bearer {make_token()}"},
    )
    event["httpMethod"] = method

    response = lambda_handler.handle_event(event, settings=settings, service=service)

    assert response["statusCode"] == 405
    assert json.loads(response["body"]) == {"message": "Method not allowed."}


def test_http_api_v2_method_is_honoured(settings: Settings, service: TransactionService) -> None:
    event = {
        "rawPath": "/transactions",
        "requestContext": {"http": {"method": "POST", "path": "/transactions"}},
        "headers": {},
        "queryStringParameters": {"startDate": "2024-03-01", "endDate": "2024-03-02"},
    }

    response = lambda_handler.handle_event(event, settings=settings, service=service)

    assert response["statusCode"] == 405


def test_handler_configures_logging_once_per_container(
    monkeypatch: pytest.MonkeyPatch, settings: Settings, db_engine: Engine
) -> None:
    calls: list[str] = []
    monkeypatch.setattr(lambda_handler, "_logging_configured", False)
    monkeypatch.setattr(lambda_handler, "configure_logging", calls.append)
    monkeypatch.setattr(lambda_handler, "get_settings", lambda: settings)
    monkeypatch.setattr(lambda_handler, "get_engine", lambda: db_engine)
    event = _api_gateway_event(
        {"startDate": "2024-03-01", "endDate": "2024-03-01"},
        {"Authorization": f"Bearer {make_token()}"},
    )

    for _ in range(3):
        assert lambda_handler.handler(event, None)["statusCode"] == 200

    assert calls == ["INFO"]
