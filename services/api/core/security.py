"""
API key authorization gate.

Pure decision function: it never writes a response. The authorization
stage turns a denial into the 401 reply.
"""

import secrets
from typing import NamedTuple, Optional

from ..config import ApiConfig, Environment
from ..models.context import RequestContext

API_KEY_HEADER = "X-API-Key"
DENY_REASON = "invalid or missing credential"

# Environments where the credential check is skipped.
OPEN_ENVIRONMENTS = frozenset({Environment.DEVELOPMENT, Environment.TEST})


class AuthDecision(NamedTuple):
    permitted: bool
    reason: Optional[str] = None


PERMIT = AuthDecision(True)


def verify_api_key(presented: Optional[str], expected: str) -> bool:
    """
    Exact, case-sensitive comparison in constant time.

    Absent or empty credentials never match, even against an empty key.
    """
    if not presented:
        return False
    return secrets.compare_digest(presented.encode("utf-8"), expected.encode("utf-8"))


def authorize(context: RequestContext, config: ApiConfig) -> AuthDecision:
    """
    Decide whether a request may proceed.

    Args:
        context: the request being processed (only headers are read)
        config: process configuration (environment and API key)

    Returns:
        AuthDecision: permit, or deny with a reason
    """
    if config.environment in OPEN_ENVIRONMENTS:
        return PERMIT

    # An unset key never matches, not even the sentinel itself.
    if config.api_key_configured and verify_api_key(
        context.header(API_KEY_HEADER), config.API_KEY
    ):
        return PERMIT

    return AuthDecision(False, DENY_REASON)
