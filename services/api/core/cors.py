"""
CORS negotiation.

Permissive outside production (the request origin is reflected), an exact
allow-list in production. A disallowed origin gets no CORS headers; the
request itself is still served and the browser does the blocking.
"""

from typing import Dict, Iterable, Optional

from ..config import Environment
from ..models.context import HttpMethod

ALLOWED_METHODS = ("GET", "POST", "PUT", "DELETE", "OPTIONS")
ALLOWED_HEADERS = ("Content-Type", "Authorization", "X-API-Key")


def is_preflight(method: str) -> bool:
    return HttpMethod.of(method) is HttpMethod.OPTIONS


class CorsNegotiator:
    def __init__(self, environment: Environment, allowed_origins: Iterable[str] = ()):
        self.environment = environment
        self.allowed_origins = frozenset(allowed_origins)

    def origin_allowed(self, origin: Optional[str]) -> bool:
        if not origin:
            return False
        if self.environment != Environment.PRODUCTION:
            return True
        return origin in self.allowed_origins

    def negotiate(self, origin: Optional[str]) -> Dict[str, str]:
        """
        Compute the CORS response headers for a request origin.

        Returns:
            Header mapping (possibly only ``Vary``) to merge into the response
        """
        headers = {"Vary": "Origin"}

        if self.origin_allowed(origin):
            headers["Access-Control-Allow-Origin"] = origin
        elif self.environment == Environment.PRODUCTION:
            return headers

        headers["Access-Control-Allow-Credentials"] = "true"
        headers["Access-Control-Allow-Methods"] = ",".join(ALLOWED_METHODS)
        headers["Access-Control-Allow-Headers"] = ",".join(ALLOWED_HEADERS)
        return headers


def negotiate(origin: Optional[str], environment: Environment, allowed_origins=()) -> Dict[str, str]:
    return CorsNegotiator(environment, allowed_origins).negotiate(origin)
