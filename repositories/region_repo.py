"""
Region Repository

Regions and sub-regions change rarely, so both reads are cached for an hour.
When the Region endpoint fails the repository falls back to the region
names configured in settings.toml so the market form stays usable.
"""

from typing import Optional
import logging

import streamlit as st

from config import ApiConfig, REGION_PATH, get_api_config
from domain.models import Region
from logging_config import setup_logging
from repositories.base import ApiError, BaseRepository

logger = setup_logging(__name__, log_file="region_repo.log")


def _get_all_regions_impl(repo: BaseRepository) -> list[Region]:
    payload = repo._get(f"{REGION_PATH}/all-regions") or []
    return [Region.from_api(item) for item in payload]


def _get_subregions_impl(repo: BaseRepository, region_id: int) -> list[Region]:
    payload = repo._get(f"{REGION_PATH}/{region_id}/subregions") or []
    return [Region.from_api(item) for item in payload]


@st.cache_data(ttl=3600, show_spinner=False)
def _get_all_regions_cached(api: ApiConfig) -> list[Region]:
    return _get_all_regions_impl(BaseRepository(api))


@st.cache_data(ttl=3600, show_spinner=False)
def _get_subregions_cached(api: ApiConfig, region_id: int) -> list[Region]:
    return _get_subregions_impl(BaseRepository(api), region_id)


def invalidate_region_caches() -> None:
    _get_all_regions_cached.clear()
    _get_subregions_cached.clear()
    logger.info("Region caches invalidated")


def fallback_regions() -> list[Region]:
    """Regions from settings.toml [regions], used when the API is down."""
    from settings_service import get_fallback_region_names

    return [Region(key=k, value=v) for k, v in sorted(get_fallback_region_names().items())]


class RegionRepository(BaseRepository):
    """Repository for the Region endpoints."""

    def __init__(self, api: ApiConfig, session=None, logger_instance: Optional[logging.Logger] = None):
        super().__init__(api, session, logger_instance)

    def get_all_regions(self, use_cache: bool = True, fallback: bool = True) -> list[Region]:
        """Get all regions (cached, TTL=3600s).

        With fallback=False an ApiError propagates instead of returning the
        configured region names.
        """
        try:
            if use_cache:
                return _get_all_regions_cached(self.api)
            return _get_all_regions_impl(self)
        except ApiError as e:
            if not fallback:
                raise
            logger.error(f"Failed to load regions, using configured fallback: {e}")
            return fallback_regions()

    def get_subregions(self, region_id: int, use_cache: bool = True) -> list[Region]:
        """Get the sub-regions of a region. Returns [] on failure."""
        try:
            if use_cache:
                return _get_subregions_cached(self.api, region_id)
            return _get_subregions_impl(self, region_id)
        except ApiError as e:
            logger.error(f"Failed to load subregions for region {region_id}: {e}")
            return []


def get_region_repository() -> RegionRepository:
    """Get or create a RegionRepository instance (session-scoped)."""
    def _create() -> RegionRepository:
        return RegionRepository(get_api_config())

    try:
        from state import get_service
        return get_service("region_repository", _create)
    except ImportError:
        logger.debug("state module unavailable, creating new RegionRepository instance")
        return _create()
