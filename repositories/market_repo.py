"""
Market Repository

Encapsulates all market endpoint access: paging, details, search,
create/update/delete and the code/name uniqueness checks.

Design Principles:
1. Single Responsibility - Only market API access, no business logic or UI
2. Cached Functions - Module-level @st.cache_data functions (Streamlit can't hash `self`)
3. Targeted Invalidation - invalidate_market_caches() runs after every write
4. BaseRepository - Inherits _request() with ApiError translation
"""

from typing import Optional
from urllib.parse import quote
import logging

import streamlit as st

from config import ApiConfig, MARKET_PATH, get_api_config
from domain.models import Market, MarketPage
from logging_config import setup_logging
from repositories.base import BaseRepository

logger = setup_logging(__name__, log_file="market_repo.log")


# =============================================================================
# Implementation Functions (non-cached, for testability)
# =============================================================================

def _list_markets_impl(repo: BaseRepository, page: int, page_size: int) -> MarketPage:
    """Fetch one page of markets. ``page`` is 0-based, the API is 1-based."""
    payload = repo._get(MARKET_PATH, params={"pageNumber": page + 1, "pageSize": page_size})
    result = MarketPage.from_api(payload)
    logger.info(f"Fetched {len(result.markets)} markets (page {page + 1}, total {result.total_records})")
    return result


def _get_market_impl(repo: BaseRepository, market_id: int) -> Market:
    """Fetch a single market with its subgroups."""
    return Market.from_api(repo._get(f"{MARKET_PATH}/{market_id}") or {})


# =============================================================================
# Cached Functions
# =============================================================================

@st.cache_data(ttl=300, show_spinner=False)
def _list_markets_cached(api: ApiConfig, page: int, page_size: int) -> MarketPage:
    return _list_markets_impl(BaseRepository(api), page, page_size)


@st.cache_data(ttl=300, show_spinner=False)
def _get_market_cached(api: ApiConfig, market_id: int) -> Market:
    return _get_market_impl(BaseRepository(api), market_id)


def invalidate_market_caches() -> None:
    """Clear market caches after a create, update or delete."""
    _list_markets_cached.clear()
    _get_market_cached.clear()
    logger.info("Market caches invalidated")


# =============================================================================
# MarketRepository Class
# =============================================================================

class MarketRepository(BaseRepository):
    """
    Repository for the Market endpoints.

    Read methods delegate to module-level cached functions unless
    ``use_cache=False``; writes always hit the API.
    """

    def __init__(self, api: ApiConfig, session=None, logger_instance: Optional[logging.Logger] = None):
        super().__init__(api, session, logger_instance)

    def list_markets(self, page: int = 0, page_size: int = 10, use_cache: bool = True) -> MarketPage:
        """Get one page of markets (cached, TTL=300s)."""
        if use_cache:
            return _list_markets_cached(self.api, page, page_size)
        return _list_markets_impl(self, page, page_size)

    def get_market(self, market_id: int, use_cache: bool = True) -> Market:
        """Get market details including subgroups (cached, TTL=300s)."""
        if use_cache:
            return _get_market_cached(self.api, market_id)
        return _get_market_impl(self, market_id)

    def search_markets(self, search_text: str) -> list[Market]:
        """Search markets by free text (name or code)."""
        payload = self._get(f"{MARKET_PATH}/search", params={"searchText": search_text})
        return list(MarketPage.from_api(payload).markets)

    def create_market(self, market: Market) -> Optional[int]:
        """Create a market and return the new id reported by the backend."""
        result = self._post(MARKET_PATH, market.to_api())
        if isinstance(result, dict):
            result = result.get("id", result.get("marketId"))
        return int(result) if result is not None else None

    def update_market(self, market_id: int, market: Market) -> None:
        self._put(f"{MARKET_PATH}/{market_id}", market.to_api())

    def delete_market(self, market_id: int) -> None:
        self._delete(f"{MARKET_PATH}/{market_id}")

    def code_exists(self, code: str) -> bool:
        """True if another market already uses this code."""
        return bool(self._get(f"{MARKET_PATH}/code-exists/{quote(code, safe='')}"))

    def name_exists(self, name: str) -> bool:
        """True if another market already uses this name."""
        return bool(self._get(f"{MARKET_PATH}/name-exists/{quote(name, safe='')}"))


# =============================================================================
# Factory Function (Streamlit Integration)
# =============================================================================

def get_market_repository() -> MarketRepository:
    """
    Get or create a MarketRepository instance.

    Uses state.get_service for session state persistence across reruns.
    Falls back to direct instantiation if state module unavailable.
    """
    def _create() -> MarketRepository:
        return MarketRepository(get_api_config())

    try:
        from state import get_service
        return get_service("market_repository", _create)
    except ImportError:
        logger.debug("state module unavailable, creating new MarketRepository instance")
        return _create()
