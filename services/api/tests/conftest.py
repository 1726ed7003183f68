import os
import pytest

# Config is loaded when services.api.main is imported, so pin the
# environment at module import time.
os.environ["NODE_ENV"] = "test"
for _name in ("API_KEY", "APP_GREETING", "PORT", "CORS_ALLOWED_ORIGINS", "MAX_BODY_BYTES"):
    os.environ.pop(_name, None)

from fastapi.testclient import TestClient  # noqa: E402

from services.api.config import ApiConfig  # noqa: E402
from services.api.main import create_app  # noqa: E402
from services.api.services.metrics import MetricsCollector  # noqa: E402

PROD_API_KEY = "prod-secret-key"


def make_config(**overrides) -> ApiConfig:
    values = {"NODE_ENV": "test"}
    values.update(overrides)
    return ApiConfig(_env_file=None, **values)


@pytest.fixture
def config_factory():
    return make_config


@pytest.fixture
def metrics():
    return MetricsCollector(default_metrics=False)


@pytest.fixture
def client(metrics):
    """Client for an app running in the test environment (no key required)."""
    app = create_app(make_config(), metrics=metrics)
    return TestClient(app)


@pytest.fixture
def prod_app(metrics):
    return create_app(make_config(NODE_ENV="production", API_KEY=PROD_API_KEY), metrics=metrics)


@pytest.fixture
def prod_client(prod_app):
    return TestClient(prod_app)
