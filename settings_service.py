"""Centralized settings loader for the application.

Infrastructure-level module: must not import from services/, repositories/,
config.py, or logging_config.py to avoid circular imports.
"""

import tomllib
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

SETTINGS_PATH = Path(__file__).parent / "settings.toml"

_cached_settings: dict | None = None


def _load_settings(settings_path: Path = SETTINGS_PATH) -> dict:
    """Load and cache settings from the TOML file."""
    global _cached_settings
    if _cached_settings is not None:
        return _cached_settings
    try:
        with open(settings_path, "rb") as f:
            _cached_settings = tomllib.load(f)
            return _cached_settings
    except Exception as e:
        logger.error("Failed to load settings from %s: %s", settings_path, e)
        raise


def clear_settings_cache() -> None:
    """Drop the cached settings so the next read goes back to disk."""
    global _cached_settings
    _cached_settings = None


def get_fallback_region_names() -> dict[int, str]:
    """Return the [regions] table keyed by int region key.

    Used when the Region endpoint is unavailable.
    """
    settings = _load_settings()
    return {int(k): v for k, v in settings.get("regions", {}).items()}


class SettingsService:
    """Read-only accessor for application settings.

    Settings are cached at module level after the first read.
    """

    def __init__(self, settings_path: str | Path = SETTINGS_PATH):
        self.settings = _load_settings(Path(settings_path))

    @property
    def settings_dict(self) -> dict:
        return self.settings

    @property
    def log_level(self) -> str:
        return self.settings["env"]["log_level"]

    @property
    def env(self) -> str:
        return self.settings["env"]["env"]

    @property
    def api_base_url(self) -> str:
        return self.settings["api"]["base_url"]

    @property
    def api_timeout(self) -> float:
        return float(self.settings["api"].get("timeout_seconds", 10))

    @property
    def verify_ssl(self) -> bool:
        return bool(self.settings["api"].get("verify_ssl", True))

    @property
    def rows_per_page_options(self) -> list[int]:
        return list(self.settings["ui"]["rows_per_page_options"])

    @property
    def default_rows(self) -> int:
        return int(self.settings["ui"]["default_rows"])
