"""
Where: services/api/tests/test_openapi_docs.py
What: Generated OpenAPI document and Swagger UI page.
"""

from services.api.api.openapi import build_openapi, to_openapi_path
from services.api.main import create_app


def test_to_openapi_path():
    assert to_openapi_path("/api/users/:userId") == "/api/users/{userId}"
    assert to_openapi_path("/healthz") == "/healthz"


def test_document_lists_public_routes(client):
    response = client.get("/api-docs/swagger.json")

    assert response.status_code == 200
    doc = response.json()
    assert doc["openapi"] == "3.0.0"
    assert doc["info"]["title"] == "User Management API"
    assert set(doc["paths"]) == {
        "/",
        "/healthz",
        "/readyz",
        "/config",
        "/api/users",
        "/api/users/{userId}",
    }
    assert set(doc["paths"]["/api/users/{userId}"]) == {"get", "put", "delete"}


def test_protected_operations_declare_api_key(client):
    doc = client.get("/api-docs/swagger.json").json()

    scheme = doc["components"]["securitySchemes"]["ApiKeyAuth"]
    assert scheme == {
        "type": "apiKey",
        "in": "header",
        "name": "X-API-Key",
        "description": "API Key for authentication",
    }
    create = doc["paths"]["/api/users"]["post"]
    assert create["security"] == [{"ApiKeyAuth": []}]
    assert "401" in create["responses"]
    assert "requestBody" in create
    assert "security" not in doc["paths"]["/healthz"]["get"]


def test_path_parameters_are_documented(client):
    doc = client.get("/api-docs/swagger.json").json()

    params = doc["paths"]["/api/users/{userId}"]["get"]["parameters"]
    assert params == [
        {"name": "userId", "in": "path", "required": True, "schema": {"type": "string"}}
    ]


def test_servers_use_configured_port(config_factory):
    app = create_app(config_factory(PORT=9123))

    servers = app.state.docs.document()["servers"]
    assert servers[0]["url"] == "http://localhost:9123"


def test_docs_are_public_in_production(prod_client):
    assert prod_client.get("/api-docs/swagger.json").status_code == 200
    assert prod_client.get("/api-docs").status_code == 200


def test_swagger_ui_page(client):
    response = client.get("/api-docs")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "swagger-ui" in response.text
    assert "/api-docs/swagger.json" in response.text


def test_build_openapi_defaults_summary_and_responses():
    doc = build_openapi([{"method": "GET", "path": "/things/:id", "params": ["id"]}])

    operation = doc["paths"]["/things/{id}"]["get"]
    assert operation["summary"] == "GET /things/{id}"
    assert operation["operationId"] == "get_things_id"
    assert operation["responses"] == {"200": {"description": "OK"}}
