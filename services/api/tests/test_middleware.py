"""
Where: services/api/tests/test_middleware.py
What: Behavior of individual pipeline stages through the full app.
"""

import logging

from fastapi.testclient import TestClient

from services.api.main import create_app


def test_preflight_returns_200_empty_for_any_path(client):
    response = client.options(
        "/does/not/exist",
        headers={"Origin": "http://localhost:3000", "Access-Control-Request-Method": "POST"},
    )

    assert response.status_code == 200
    assert response.content == b""
    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
    assert response.headers["access-control-allow-credentials"] == "true"
    assert "X-API-Key" in response.headers["access-control-allow-headers"]


def test_preflight_bypasses_authorization_in_production(prod_client):
    response = prod_client.options("/config", headers={"Origin": "https://yourdomain.com"})

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "https://yourdomain.com"


def test_preflight_from_unknown_origin_in_production_has_no_cors_headers(prod_client):
    response = prod_client.options("/config", headers={"Origin": "https://evil.example.com"})

    assert response.status_code == 200
    assert "access-control-allow-origin" not in response.headers
    assert "access-control-allow-methods" not in response.headers


def test_cors_headers_are_added_to_error_responses(prod_client):
    response = prod_client.get("/config", headers={"Origin": "https://api.example.com"})

    assert response.status_code == 401
    assert response.headers["access-control-allow-origin"] == "https://api.example.com"


def test_malformed_json_body_is_rejected(client):
    response = client.post(
        "/api/users",
        content=b'{"email": "a@b.c",',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Malformed JSON body"}


def test_deeply_nested_json_is_rejected_as_malformed(client):
    body = b"[" * 50000 + b"]" * 50000

    response = client.post("/api/users", content=body, headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert response.json() == {"error": "Malformed JSON body"}


def test_malformed_json_is_rejected_even_on_unknown_routes(client):
    response = client.post(
        "/nowhere", content=b"{not json", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400


def test_non_json_body_is_left_undecoded(client):
    response = client.post(
        "/api/users",
        content=b"email=a@b.c&name=x&password=y",
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Email, name, and password are required"}


def test_structured_json_suffix_is_decoded(client):
    response = client.post(
        "/api/users",
        content=b'{"email": "a@b.c", "name": "A", "password": "p"}',
        headers={"Content-Type": "application/vnd.api+json; charset=utf-8"},
    )

    assert response.status_code == 201


def test_oversized_body_is_rejected(config_factory):
    client = TestClient(create_app(config_factory(MAX_BODY_BYTES=16)))

    response = client.post(
        "/api/users", json={"email": "someone@example.com", "name": "A", "password": "p"}
    )

    assert response.status_code == 413
    assert response.json() == {"error": "Request body too large"}


def test_request_id_is_echoed(client):
    response = client.get("/healthz", headers={"X-Request-Id": "req-abc-123"})

    assert response.headers["x-request-id"] == "req-abc-123"


def test_request_id_is_generated_when_absent(client):
    first = client.get("/healthz").headers["x-request-id"]
    second = client.get("/healthz").headers["x-request-id"]

    assert first and second
    assert first != second


def test_access_log_records_each_request(client, caplog):
    caplog.set_level(logging.INFO, logger="api.access")

    client.get("/api/users/42?verbose=1", headers={"User-Agent": "pytest-agent"})

    records = [r for r in caplog.records if r.name == "api.access"]
    assert len(records) == 1
    record = records[0]
    assert record.getMessage() == "GET /api/users/42 200"
    assert record.route == "/api/users/:userId"
    assert record.status == 200
    assert record.query_params == {"verbose": "1"}
    assert record.user_agent == "pytest-agent"
    assert record.latency_ms >= 0


def test_authorization_denial_is_logged_without_key(prod_client, caplog):
    caplog.set_level(logging.WARNING, logger="api.access")

    prod_client.get("/config", headers={"X-API-Key": "guess-1234"})

    denials = [r for r in caplog.records if "Authorization denied" in r.getMessage()]
    assert len(denials) == 1
    assert "guess-1234" not in denials[0].getMessage()
