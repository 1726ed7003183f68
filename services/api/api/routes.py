"""
Route table.

Where: services/api/api/routes.py
What: Register every endpoint into the router at startup, then freeze it.
"""

from functools import partial
from typing import Tuple

from ..config import ApiConfig
from ..services.metrics import MetricsCollector
from ..services.route_matcher import Router
from ..services.user_store import UserRepository
from . import handlers
from .openapi import DOCS_JSON_PATH, DOCS_PATH, ApiDocs

_USER_RESPONSES = {"200": "User record", "404": "User not found"}


def build_router(
    config: ApiConfig, collector: MetricsCollector, repository: UserRepository
) -> Tuple[Router, ApiDocs]:
    router = Router()
    docs = ApiDocs(router, config)

    router.register(
        "GET",
        "/",
        partial(handlers.root, config=config),
        summary="Greeting message",
        description="Returns the configured greeting as plain text",
        tags=("General",),
    )
    router.register(
        "GET",
        "/healthz",
        handlers.healthz,
        summary="Liveness check",
        tags=("Health",),
    )
    router.register(
        "GET",
        "/readyz",
        handlers.readyz,
        summary="Readiness check",
        tags=("Health",),
    )
    router.register(
        "GET",
        "/metrics",
        partial(handlers.metrics, collector=collector),
        summary="Prometheus metrics",
        tags=("Health",),
        include_in_docs=False,
    )
    router.register(
        "GET",
        "/config",
        partial(handlers.show_config, config=config),
        requires_auth=True,
        summary="Current application settings",
        tags=("Configuration",),
    )

    router.register(
        "GET",
        "/api/users",
        partial(handlers.list_users, repository=repository),
        requires_auth=True,
        summary="List users",
        description="Query parameters: page (default 1), limit (default 10, max 100)",
        tags=("Users",),
        responses={"200": "Users with pagination"},
    )
    router.register(
        "POST",
        "/api/users",
        partial(handlers.create_user, repository=repository),
        requires_auth=True,
        summary="Create a user",
        tags=("Users",),
        accepts_body=True,
        responses={"201": "User created", "400": "Validation error"},
    )
    router.register(
        "GET",
        "/api/users/:userId",
        partial(handlers.get_user, repository=repository),
        requires_auth=True,
        summary="Get a user",
        tags=("Users",),
        responses=_USER_RESPONSES,
    )
    router.register(
        "PUT",
        "/api/users/:userId",
        partial(handlers.update_user, repository=repository),
        requires_auth=True,
        summary="Update a user",
        tags=("Users",),
        accepts_body=True,
        responses={**_USER_RESPONSES, "400": "Validation error"},
    )
    router.register(
        "DELETE",
        "/api/users/:userId",
        partial(handlers.delete_user, repository=repository),
        requires_auth=True,
        summary="Delete a user",
        tags=("Users",),
        responses={"204": "User deleted"},
    )

    router.register(
        "GET",
        DOCS_JSON_PATH,
        partial(handlers.openapi_document, docs=docs),
        include_in_docs=False,
    )
    router.register(
        "GET",
        DOCS_PATH,
        partial(handlers.swagger_ui, docs=docs),
        include_in_docs=False,
    )

    router.freeze()
    return router, docs
