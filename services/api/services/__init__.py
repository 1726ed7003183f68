"""
Services package.

Provides routing, metrics and the user repository.
"""

from .metrics import MetricsCollector
from .route_matcher import Router
from .user_store import MockUserRepository, UserRepository

__all__ = [
    "MetricsCollector",
    "Router",
    "MockUserRepository",
    "UserRepository",
]
