"""
API Configuration

Resolves the backend API location from settings.toml, with the
MARKET_ADMIN_API_URL environment variable taking precedence.
"""

import os
from dataclasses import dataclass

from logging_config import setup_logging

logger = setup_logging(__name__)

API_URL_ENV_VAR = "MARKET_ADMIN_API_URL"

# Backend resource paths, relative to ApiConfig.base_url
MARKET_PATH = "Market"
SUBGROUP_PATH = "MarketSubgroup"
REGION_PATH = "Region"


def get_settings() -> dict:
    from settings_service import SettingsService

    return SettingsService().settings_dict


@dataclass(frozen=True)
class ApiConfig:
    """Connection settings for the backend REST API.

    Attributes:
        base_url: API root without trailing slash (e.g. https://host/api)
        timeout: Per-request timeout in seconds
        verify_ssl: Whether TLS certificates are verified
    """
    base_url: str
    timeout: float = 10.0
    verify_ssl: bool = True

    def url(self, path: str) -> str:
        """Join a resource path onto the base URL."""
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"


def get_api_config() -> ApiConfig:
    """Build the ApiConfig from settings.toml and the environment."""
    from settings_service import SettingsService

    settings = SettingsService()
    base_url = os.environ.get(API_URL_ENV_VAR) or settings.api_base_url
    if os.environ.get(API_URL_ENV_VAR):
        logger.info(f"Using API base url from {API_URL_ENV_VAR}: {base_url}")
    return ApiConfig(
        base_url=base_url.rstrip("/"),
        timeout=settings.api_timeout,
        verify_ssl=settings.verify_ssl,
    )
