"""
Route matching service.

Holds the ordered route table and dispatches requests to handlers.

Note:
    Provides functionality different from FastAPI's APIRouter.
    FastAPI only exposes a catch-all route; every path is resolved here so
    that the middleware pipeline sees each request before any handler.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Pattern, Tuple

from ..core.exceptions import ApiError, RouteNotFoundError
from ..models.context import HttpMethod, RequestContext
from ..models.response import ApiResponse, error_response

logger = logging.getLogger("api.router")

Handler = Callable[[RequestContext], ApiResponse]

_PARAM_SEGMENT_RE = re.compile(r"^:([A-Za-z_][A-Za-z0-9_]*)$")


@dataclass(frozen=True)
class RouteEntry:
    """
    One registered route.

    ``pattern`` uses literal segments and ``:name`` parameter segments,
    e.g. "/api/users/:userId".
    """

    method: str
    pattern: str
    handler: Handler
    regex: Pattern[str]
    param_names: Tuple[str, ...]
    requires_auth: bool = False
    summary: str = ""
    description: str = ""
    tags: Tuple[str, ...] = ()
    accepts_body: bool = False
    responses: Dict[str, str] = field(default_factory=dict)
    include_in_docs: bool = True


class RouteMatch(NamedTuple):
    entry: RouteEntry
    path_params: Dict[str, str]


def compile_pattern(pattern: str) -> Tuple[Pattern[str], Tuple[str, ...]]:
    """
    Convert a path pattern to a regular expression.

    Example: "/users/:userId/posts/:postId"
        → "^/users/(?P<userId>[^/]+)/posts/(?P<postId>[^/]+)/?$"

    A single trailing slash on the request path is tolerated.
    """
    if not pattern.startswith("/"):
        raise ValueError(f"Route pattern must start with '/': {pattern!r}")

    parts = []
    names = []
    for segment in pattern.strip("/").split("/"):
        if not segment:
            continue
        param = _PARAM_SEGMENT_RE.match(segment)
        if param:
            name = param.group(1)
            if name in names:
                raise ValueError(f"Duplicate parameter {name!r} in pattern {pattern!r}")
            names.append(name)
            parts.append(f"(?P<{name}>[^/]+)")
        elif segment.startswith(":"):
            raise ValueError(f"Invalid parameter segment {segment!r} in pattern {pattern!r}")
        else:
            parts.append(re.escape(segment))

    if not parts:
        return re.compile(r"^/$"), ()
    return re.compile("^/" + "/".join(parts) + "/?$"), tuple(names)


class Router:
    def __init__(self):
        self._routes: List[RouteEntry] = []
        self._frozen = False

    def register(
        self,
        method: str,
        pattern: str,
        handler: Handler,
        *,
        requires_auth: bool = False,
        summary: str = "",
        description: str = "",
        tags: Tuple[str, ...] = (),
        accepts_body: bool = False,
        responses: Optional[Dict[str, str]] = None,
        include_in_docs: bool = True,
    ) -> RouteEntry:
        """
        Register a route entry. Only allowed before ``freeze()``.

        Raises:
            RuntimeError: the table is already frozen
            ValueError: invalid pattern or duplicate (method, pattern)
        """
        if self._frozen:
            raise RuntimeError("Route table is frozen; register routes at startup")

        method = method.upper()
        for existing in self._routes:
            if existing.method == method and existing.pattern == pattern:
                raise ValueError(f"Route already registered: {method} {pattern}")

        regex, names = compile_pattern(pattern)
        entry = RouteEntry(
            method=method,
            pattern=pattern,
            handler=handler,
            regex=regex,
            param_names=names,
            requires_auth=requires_auth,
            summary=summary,
            description=description,
            tags=tuple(tags),
            accepts_body=accepts_body,
            responses=dict(responses or {}),
            include_in_docs=include_in_docs,
        )
        self._routes.append(entry)
        logger.debug(f"Registered route {method} {pattern}")
        return entry

    def freeze(self) -> None:
        self._frozen = True
        logger.info(f"Route table frozen with {len(self._routes)} routes")

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def routes(self) -> Tuple[RouteEntry, ...]:
        return tuple(self._routes)

    def match_route(self, request_path: str, request_method: str) -> Optional[RouteMatch]:
        """
        Resolve the route entry for a request path and method.

        Matching is method-specific: a path registered only for another
        method does not match, except that HEAD falls back to the GET
        entry for the same path. First registered entry wins.

        Args:
            request_path: request path (e.g., "/api/users/123")
            request_method: HTTP method (e.g., "POST")

        Returns:
            RouteMatch, or None when nothing matches
        """
        method = HttpMethod.of(request_method)
        match = self._first_match(request_path, request_method.upper())
        if match is None and method is HttpMethod.HEAD:
            match = self._first_match(request_path, HttpMethod.GET.value)
        return match

    def _first_match(self, request_path: str, method: str) -> Optional[RouteMatch]:
        for entry in self._routes:
            if entry.method != method:
                continue
            match = entry.regex.match(request_path)
            if match:
                return RouteMatch(entry, match.groupdict())
        return None

    def resolve(self, context: RequestContext) -> Optional[RouteMatch]:
        """
        Resolve the route for a request once and record it on the context.
        """
        if not context.route_resolved:
            match = self.match_route(context.path, context.method)
            context.route_resolved = True
            if match:
                context.route = match
                context.route_path = match.entry.pattern
                context.path_params = dict(match.path_params)
        return context.route

    def dispatch(self, context: RequestContext) -> ApiResponse:
        """
        Call the matched handler; 404 when no entry matches.

        Handler failures are converted into responses and never propagate.
        """
        match = self.resolve(context)
        if match is None:
            return RouteNotFoundError().to_response()

        try:
            return match.entry.handler(context)
        except ApiError as e:
            return e.to_response()
        except Exception as e:
            logger.error(
                f"Handler failed for {match.entry.method} {match.entry.pattern}: {e}",
                exc_info=True,
                extra={"method": context.method, "path": context.path},
            )
            return error_response("Internal Server Error", 500)

    def list_routes(self) -> List[Dict[str, Any]]:
        """Route metadata for documentation."""
        return [
            {
                "method": entry.method,
                "path": entry.pattern,
                "requires_auth": entry.requires_auth,
                "summary": entry.summary,
                "description": entry.description,
                "tags": list(entry.tags),
                "accepts_body": entry.accepts_body,
                "params": list(entry.param_names),
                "responses": dict(entry.responses),
            }
            for entry in self._routes
            if entry.include_in_docs
        ]
