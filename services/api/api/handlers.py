"""
Route handlers.

Each handler maps a RequestContext to an ApiResponse. Dependencies are
bound with functools.partial when routes are registered.
"""

import logging
import math
import re
from typing import Any, Dict, Optional

from ..config import ApiConfig
from ..core.exceptions import BadRequestError, UserNotFoundError
from ..models.context import RequestContext
from ..models.response import (
    HTML_MEDIA_TYPE,
    ApiResponse,
    empty_response,
    json_response,
    text_response,
)
from ..models.user import Pagination, UserList, UserRole
from ..services.metrics import MetricsCollector
from ..services.user_store import UserRepository
from .openapi import ApiDocs

logger = logging.getLogger("api.handlers")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100

REQUIRED_FIELDS_MESSAGE = "Email, name, and password are required"
INVALID_EMAIL_MESSAGE = "Invalid email format"

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")
_ROLES = frozenset(role.value for role in UserRole)


# ===========================================
# Operational endpoints
# ===========================================


def root(context: RequestContext, config: ApiConfig) -> ApiResponse:
    return text_response(config.APP_GREETING)


def healthz(context: RequestContext) -> ApiResponse:
    return json_response({"status": "ok"})


def readyz(context: RequestContext) -> ApiResponse:
    return json_response({"status": "ready"})


def show_config(context: RequestContext, config: ApiConfig) -> ApiResponse:
    return json_response({"APP_GREETING": config.APP_GREETING, "API_KEY": config.API_KEY})


def metrics(context: RequestContext, collector: MetricsCollector) -> ApiResponse:
    return text_response(collector.snapshot().decode("utf-8"), media_type=collector.content_type)


# ===========================================
# Users
# ===========================================


def parse_positive_int(value: Optional[str], default: int) -> int:
    """
    Read the leading integer of a query value.

    Missing, non-numeric and zero values fall back to ``default``.
    """
    if value is None:
        return default
    match = _LEADING_INT_RE.match(value)
    if not match:
        return default
    return int(match.group(1)) or default


def _json_object(context: RequestContext) -> Dict[str, Any]:
    return context.body if isinstance(context.body, dict) else {}


def _validate_role(role: Any) -> str:
    if role is None or role == "":
        return UserRole.USER.value
    if not isinstance(role, str) or role not in _ROLES:
        raise BadRequestError(f"Invalid role; expected one of: {', '.join(sorted(_ROLES))}")
    return role


def list_users(context: RequestContext, repository: UserRepository) -> ApiResponse:
    page = max(parse_positive_int(context.query_params.get("page"), DEFAULT_PAGE), 1)
    limit = parse_positive_int(context.query_params.get("limit"), DEFAULT_LIMIT)
    limit = min(max(limit, 1), MAX_LIMIT)

    users, total = repository.list(page, limit)
    result = UserList(
        users=users,
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit),
        ),
    )
    return json_response(result.to_wire())


def create_user(context: RequestContext, repository: UserRepository) -> ApiResponse:
    payload = _json_object(context)
    email = payload.get("email")
    name = payload.get("name")
    password = payload.get("password")

    if not email or not name or not password:
        raise BadRequestError(REQUIRED_FIELDS_MESSAGE)

    if not isinstance(email, str) or "@" not in email:
        raise BadRequestError(INVALID_EMAIL_MESSAGE)

    if not isinstance(name, str) or not isinstance(password, str):
        raise BadRequestError("Name and password must be strings")

    role = _validate_role(payload.get("role"))

    user = repository.create(email=email, name=name, password=password, role=role)
    logger.info(f"Created user {user.id}", extra={"user_id": user.id})
    return json_response(user.to_wire(), status_code=201)


def get_user(context: RequestContext, repository: UserRepository) -> ApiResponse:
    user = repository.get(context.path_params["userId"])
    if user is None:
        raise UserNotFoundError()
    return json_response(user.to_wire())


def update_user(context: RequestContext, repository: UserRepository) -> ApiResponse:
    payload = _json_object(context)
    changes: Dict[str, Any] = {}

    name = payload.get("name")
    if name:
        if not isinstance(name, str):
            raise BadRequestError("Name must be a string")
        changes["name"] = name

    if payload.get("role"):
        changes["role"] = _validate_role(payload["role"])

    user = repository.update(context.path_params["userId"], changes)
    if user is None:
        raise UserNotFoundError()
    return json_response(user.to_wire())


def delete_user(context: RequestContext, repository: UserRepository) -> ApiResponse:
    repository.delete(context.path_params["userId"])
    return empty_response(204)


# ===========================================
# API documentation
# ===========================================


def openapi_document(context: RequestContext, docs: ApiDocs) -> ApiResponse:
    return json_response(docs.document())


def swagger_ui(context: RequestContext, docs: ApiDocs) -> ApiResponse:
    return text_response(docs.swagger_html(), media_type=HTML_MEDIA_TYPE)
