"""
Data model definitions package.

Aggregates Pydantic models for use in other modules.
"""

from .context import HttpMethod, Identity, RequestContext
from .response import (
    ApiResponse,
    empty_response,
    error_response,
    json_response,
    text_response,
)
from .user import Pagination, User, UserList, UserRole

__all__ = [
    "HttpMethod",
    "Identity",
    "RequestContext",
    "ApiResponse",
    "empty_response",
    "error_response",
    "json_response",
    "text_response",
    "Pagination",
    "User",
    "UserList",
    "UserRole",
]
