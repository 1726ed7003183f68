"""
Core logic package.

Provides the pipeline driver, the authorization gate and CORS negotiation.
"""

from .cors import CorsNegotiator, is_preflight
from .pipeline import Pipeline, Stage
from .security import AuthDecision, authorize

__all__ = [
    "CorsNegotiator",
    "is_preflight",
    "Pipeline",
    "Stage",
    "AuthDecision",
    "authorize",
]
