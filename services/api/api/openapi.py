"""
API documentation.

Where: services/api/api/openapi.py
What: Build the OpenAPI document from the route table and serve Swagger UI.
Why: Every route lives in our own router, so FastAPI's generator cannot see them.
"""

import re
from typing import Any, Dict, List, Mapping, Optional, Sequence

from fastapi.openapi.docs import get_swagger_ui_html

from ..config import ApiConfig
from ..services.route_matcher import Router

OPENAPI_VERSION = "3.0.0"
DOCS_PATH = "/api-docs"
DOCS_JSON_PATH = "/api-docs/swagger.json"
SECURITY_SCHEME = "ApiKeyAuth"

_PARAM_SEGMENT_RE = re.compile(r":([A-Za-z_][A-Za-z0-9_]*)")

_INFO = {
    "title": "User Management API",
    "version": "1.0.0",
    "description": "FastAPI service with operational endpoints and a user API",
    "contact": {"name": "API Support", "email": "support@example.com"},
    "license": {"name": "ISC", "url": "https://opensource.org/licenses/ISC"},
}

_TAGS = [
    {"name": "General", "description": "General endpoints"},
    {"name": "Health", "description": "Health check endpoints"},
    {"name": "Configuration", "description": "Configuration endpoints"},
    {"name": "Users", "description": "User management endpoints"},
]

_SCHEMAS: Dict[str, Any] = {
    "User": {
        "type": "object",
        "required": ["email", "name"],
        "properties": {
            "id": {"type": "string", "example": "user-123"},
            "email": {"type": "string", "format": "email", "example": "user@example.com"},
            "name": {"type": "string", "example": "DefaultUser"},
            "role": {"type": "string", "enum": ["user", "admin", "read-only-admin"]},
            "createdAt": {"type": "string", "format": "date-time"},
        },
    },
    "CreateUserRequest": {
        "type": "object",
        "required": ["email", "name", "password"],
        "properties": {
            "email": {"type": "string", "format": "email", "example": "user@example.com"},
            "name": {"type": "string", "example": "DefaultUser"},
            "password": {"type": "string", "example": "password"},
            "role": {"type": "string", "enum": ["user", "admin", "read-only-admin"]},
        },
    },
    "Error": {
        "type": "object",
        "properties": {"error": {"type": "string", "example": "Invalid API key"}},
    },
}


def to_openapi_path(pattern: str) -> str:
    """'/api/users/:userId' -> '/api/users/{userId}'"""
    return _PARAM_SEGMENT_RE.sub(r"{\1}", pattern)


def build_openapi(
    routes: Sequence[Mapping[str, Any]],
    servers: Optional[List[Dict[str, str]]] = None,
) -> Dict[str, Any]:
    """
    Generate the OpenAPI document for the given route metadata.
    """
    schema: Dict[str, Any] = {
        "openapi": OPENAPI_VERSION,
        "info": dict(_INFO),
        "servers": servers or [],
        "tags": list(_TAGS),
        "components": {
            "securitySchemes": {
                SECURITY_SCHEME: {
                    "type": "apiKey",
                    "in": "header",
                    "name": "X-API-Key",
                    "description": "API Key for authentication",
                }
            },
            "schemas": dict(_SCHEMAS),
        },
        "paths": {},
    }
    _inject_routing_paths(schema, routes)
    return schema


def _inject_routing_paths(schema: Dict[str, Any], routes: Sequence[Mapping[str, Any]]) -> None:
    paths = schema["paths"]

    for route in routes:
        method_key = route["method"].lower()
        path = to_openapi_path(route["path"])
        path_item = paths.setdefault(path, {})
        if method_key in path_item:
            continue

        operation: Dict[str, Any] = {
            "summary": route.get("summary") or f"{route['method']} {path}",
            "operationId": _build_operation_id(method=method_key, path=path),
            "responses": {
                str(code): {"description": description}
                for code, description in (route.get("responses") or {"200": "OK"}).items()
            },
        }
        if route.get("description"):
            operation["description"] = route["description"]
        if route.get("tags"):
            operation["tags"] = list(route["tags"])

        if route.get("requires_auth"):
            operation["security"] = [{SECURITY_SCHEME: []}]
            operation["responses"].setdefault("401", {"description": "Invalid API key"})

        params = _build_path_parameters(route.get("params") or [])
        if params:
            operation["parameters"] = params

        if route.get("accepts_body"):
            operation["requestBody"] = {
                "required": True,
                "content": {"application/json": {"schema": {"type": "object"}}},
            }

        path_item[method_key] = operation


def _build_path_parameters(names: Sequence[str]) -> List[Dict[str, Any]]:
    return [
        {
            "name": name,
            "in": "path",
            "required": True,
            "schema": {"type": "string"},
        }
        for name in names
    ]


def _build_operation_id(*, method: str, path: str) -> str:
    safe_path = re.sub(r"[^a-zA-Z0-9_]+", "_", path).strip("_") or "root"
    return f"{method}_{safe_path}"


class ApiDocs:
    """
    Lazily built documentation for a frozen router.

    The document is generated on first request, after startup registration.
    """

    def __init__(self, router: Router, config: ApiConfig):
        self.router = router
        self.config = config
        self._document: Optional[Dict[str, Any]] = None

    def servers(self) -> List[Dict[str, str]]:
        return [
            {
                "url": f"http://localhost:{self.config.PORT}",
                "description": f"{self.config.environment.value} server (localhost)",
            },
            {"url": "https://api.example.com", "description": "Production server"},
        ]

    def document(self) -> Dict[str, Any]:
        if self._document is None or not self.router.frozen:
            self._document = build_openapi(self.router.list_routes(), self.servers())
        return self._document

    def swagger_html(self) -> str:
        response = get_swagger_ui_html(
            openapi_url=DOCS_JSON_PATH,
            title="API Documentation",
            swagger_ui_parameters={
                "docExpansion": "list",
                "filter": True,
                "tryItOutEnabled": True,
            },
        )
        return response.body.decode("utf-8")
