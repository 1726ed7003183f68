"""
Where: services/api/tests/test_config_defaults.py
What: Validate default ApiConfig values and environment parsing.
Why: Keep the unset-key sentinel and environment aliases stable.
"""

import pytest
from pydantic import ValidationError

from services.api.config import API_KEY_UNSET, ApiConfig, Environment


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("NODE_ENV", "API_KEY", "APP_GREETING", "PORT", "CORS_ALLOWED_ORIGINS"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    config = ApiConfig(_env_file=None)

    assert config.environment is Environment.DEVELOPMENT
    assert config.APP_GREETING == "Hello from FastAPI!"
    assert config.API_KEY == API_KEY_UNSET
    assert config.api_key_configured is False
    assert config.PORT == 8000
    assert config.MAX_BODY_BYTES == 100 * 1024


def test_values_come_from_environment(clean_env):
    clean_env.setenv("NODE_ENV", "production")
    clean_env.setenv("API_KEY", "k-123")
    clean_env.setenv("APP_GREETING", "Hi")
    clean_env.setenv("PORT", "9000")
    clean_env.setenv("CORS_ALLOWED_ORIGINS", '["https://a.example.com"]')

    config = ApiConfig(_env_file=None)

    assert config.environment is Environment.PRODUCTION
    assert config.API_KEY == "k-123"
    assert config.api_key_configured is True
    assert config.APP_GREETING == "Hi"
    assert config.PORT == 9000
    assert config.CORS_ALLOWED_ORIGINS == ["https://a.example.com"]


def test_empty_key_counts_as_configured(clean_env):
    clean_env.setenv("API_KEY", "")

    assert ApiConfig(_env_file=None).api_key_configured is True


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("dev", Environment.DEVELOPMENT),
        ("Development", Environment.DEVELOPMENT),
        ("TEST", Environment.TEST),
        ("prod", Environment.PRODUCTION),
        (" production ", Environment.PRODUCTION),
    ],
)
def test_environment_aliases(clean_env, raw, expected):
    clean_env.setenv("NODE_ENV", raw)

    assert ApiConfig(_env_file=None).environment is expected


def test_unknown_environment_fails_fast(clean_env):
    clean_env.setenv("NODE_ENV", "staging")

    with pytest.raises(ValidationError):
        ApiConfig(_env_file=None)


def test_max_body_bytes_must_be_positive(clean_env):
    clean_env.setenv("MAX_BODY_BYTES", "0")

    with pytest.raises(ValidationError):
        ApiConfig(_env_file=None)


def test_config_is_frozen(clean_env):
    config = ApiConfig(_env_file=None)

    with pytest.raises(ValidationError):
        config.API_KEY = "changed"
