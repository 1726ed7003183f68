"""
Request context models.

Encapsulates all per-request data flowing through the pipeline.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..config import Environment


class HttpMethod(str, Enum):
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    OTHER = "OTHER"

    @classmethod
    def of(cls, method: str) -> "HttpMethod":
        try:
            return cls(method.upper())
        except ValueError:
            return cls.OTHER


class Identity(BaseModel):
    """Authorization result attached by the authorization stage."""

    authorized: bool = False
    environment: Environment = Environment.DEVELOPMENT


class RequestContext(BaseModel):
    """
    Transient state of one request.

    This model decouples the pipeline from Starlette's Request object.
    Header names are stored lower-cased; use ``header()`` for lookups.
    """

    method: str
    path: str
    query_params: Dict[str, str] = Field(default_factory=dict)
    path_params: Dict[str, str] = Field(default_factory=dict)
    headers: Dict[str, List[str]] = Field(default_factory=dict)
    raw_body: bytes = b""
    body: Optional[Any] = None
    client: Optional[str] = None
    identity: Identity = Field(default_factory=Identity)

    # Set by the router on first resolution.
    route_resolved: bool = False
    route: Optional[Any] = Field(default=None, exclude=True, repr=False)
    route_path: Optional[str] = None

    @classmethod
    def build(
        cls,
        method: str,
        path: str,
        headers: Optional[List[tuple]] = None,
        **kwargs: Any,
    ) -> "RequestContext":
        """Create a context, folding header pairs into lower-cased multi-value form."""
        folded: Dict[str, List[str]] = {}
        for name, value in headers or []:
            folded.setdefault(name.lower(), []).append(value)
        return cls(method=method.upper(), path=path, headers=folded, **kwargs)

    @property
    def http_method(self) -> HttpMethod:
        return HttpMethod.of(self.method)

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Return the first value of a header (case-insensitive)."""
        values = self.headers.get(name.lower())
        if not values:
            return default
        return values[0]
