from typing import Optional

from services.common.core.logging_config import setup_logging as common_setup_logging

from ..config import ApiConfig


def setup_logging(api_config: Optional[ApiConfig] = None):
    """
    Load the YAML config and initialize logging.
    """
    api_config = api_config or ApiConfig()
    common_setup_logging(api_config.LOG_CONFIG_PATH, defaults={"LOG_LEVEL": api_config.LOG_LEVEL})
