"""
RequestContext management.
Use ContextVar to share the Request ID across async execution.
"""

import uuid
from contextvars import ContextVar
from typing import Optional

# Longer values are treated as garbage and replaced.
MAX_REQUEST_ID_LENGTH = 128

# Context variable for Request ID.
_request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def get_request_id() -> Optional[str]:
    """Get the current Request ID."""
    return _request_id_var.get()


def generate_request_id() -> str:
    """
    Generate and set a new Request ID (UUID) for the current context.
    """
    new_id = str(uuid.uuid4())
    _request_id_var.set(new_id)
    return new_id


def set_request_id(request_id: Optional[str]) -> str:
    """
    Adopt an incoming request ID, or generate one when it is missing or unusable.

    Args:
        request_id: X-Request-Id header value (may be None)

    Returns:
        The Request ID that was set
    """
    if not request_id:
        return generate_request_id()

    candidate = request_id.strip()
    if not candidate or len(candidate) > MAX_REQUEST_ID_LENGTH or not candidate.isprintable():
        return generate_request_id()

    _request_id_var.set(candidate)
    return candidate


def clear_request_id() -> None:
    """Clear the Request ID context."""
    _request_id_var.set(None)
