from __future__ import annotations

from fastapi.testclient import TestClient


def test_root_reports_service_name(client: TestClient) -> None:
    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "transactions-service"}


def test_liveness_and_readiness(client: TestClient) -> None:
    assert client.get("/healthz").json()["status"] == "ok"
    assert client.get("/readyz").json()["status"] == "ready"


def test_health_needs_no_token_and_echoes_request_id(client: TestClient) -> None:
    response = client.get("/", headers={"X-Request-ID": "abc123"})

    assert response.status_code == 200
    assert response.headers["X-Request-ID"] == "abc123"


def test_metrics_count_requests(client: TestClient) -> None:
    client.get("/")

    response = client.get("/metrics")

    assert response.status_code == 200
    assert 'http_requests_total{method="GET",path="/",status="200"}' in response.text


def test_metrics_label_unknown_paths_by_route_not_url(client: TestClient) -> None:
    for suffix in ("a1", "b2", "c3"):
        assert client.get(f"/wp-admin/{suffix}.php").status_code == 404

    text = client.get("/metrics").text

    assert "wp-admin" not in text
    assert 'http_requests_total{method="GET",path="unmatched",status="404"}' in text


def test_metrics_label_transactions_by_route_template(client: TestClient) -> None:
    client.get("/transactions", params={"startDate": "2024-03-01", "endDate": "2024-03-02"})

    text = client.get("/metrics").text

    assert 'http_requests_total{method="GET",path="/transactions",status="401"}' in text
