"""
API service configuration definition.

Loads configuration from environment variables and provides a Pydantic model.
Uses pydantic-settings for type safety and defaults.
"""

import sys
from enum import Enum
from typing import List

from pydantic import Field, field_validator
from services.common.core.config import BaseAppConfig

# Distinguishes "not configured" from an explicitly empty key.
API_KEY_UNSET = "not-set"


class Environment(str, Enum):
    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


_ENVIRONMENT_ALIASES = {
    "dev": Environment.DEVELOPMENT,
    "prod": Environment.PRODUCTION,
}


class ApiConfig(BaseAppConfig):
    """
    Configuration management for the API service.
    """

    # Runtime environment
    NODE_ENV: Environment = Field(
        default=Environment.DEVELOPMENT, description="development / test / production"
    )

    # Server settings
    HOST: str = Field(default="0.0.0.0", description="Listen host")
    PORT: int = Field(default=8000, description="Listen port")

    # Application settings
    APP_GREETING: str = Field(default="Hello from FastAPI!", description="Root greeting text")
    API_KEY: str = Field(default=API_KEY_UNSET, description="Shared secret for X-API-Key")

    # CORS allow-list (production only)
    CORS_ALLOWED_ORIGINS: List[str] = Field(
        default=["https://api.example.com", "https://yourdomain.com"],
        description="Origins allowed in production",
    )

    # Body decoder
    MAX_BODY_BYTES: int = Field(default=100 * 1024, gt=0, description="Max JSON body size")

    @field_validator("NODE_ENV", mode="before")
    @classmethod
    def _normalize_environment(cls, value):
        if isinstance(value, str):
            key = value.strip().lower()
            return _ENVIRONMENT_ALIASES.get(key, key)
        return value

    @property
    def environment(self) -> Environment:
        return self.NODE_ENV

    @property
    def api_key_configured(self) -> bool:
        return self.API_KEY != API_KEY_UNSET


def load_config() -> ApiConfig:
    """
    Load configuration once at startup.
    pydantic-settings reads environment variables during instantiation.
    """
    try:
        return ApiConfig()
    except Exception as e:
        # Default to failing fast on invalid settings.
        sys.stderr.write(f"Failed to load configuration: {e}\n")
        raise
