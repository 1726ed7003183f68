"""
Where: services/api/lifecycle.py
What: Startup/shutdown logging for the API service.
Why: Keep main.py focused on app assembly.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from .config import ApiConfig, Environment

logger = logging.getLogger("api.main")


@asynccontextmanager
async def manage_lifespan(app: FastAPI, api_config: ApiConfig) -> AsyncIterator[None]:
    """Manage application lifecycle."""
    logger.info(
        "API starting",
        extra={
            "environment": api_config.environment.value,
            "greeting": api_config.APP_GREETING,
            "api_key_configured": api_config.api_key_configured,
            "routes": len(app.state.router.routes),
        },
    )
    if not api_config.api_key_configured and api_config.environment == Environment.PRODUCTION:
        logger.warning("API_KEY is not set; protected routes will reject every request")

    yield

    logger.info("API shutting down")
