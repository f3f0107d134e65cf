"""
Repository Layer Package

This package contains repository classes that encapsulate all backend API
access. Repositories provide a clean abstraction over HTTP, making the code
more testable and maintainable.

Key Components:
- BaseRepository / ApiError: requests.Session wrapper with error translation
- MarketRepository: Market list, details, search, writes and uniqueness checks
- SubgroupRepository: Subgroups per market and the persisted cross-check list
- RegionRepository: Regions and sub-regions with configured fallback
"""

from repositories.base import ApiError, BaseRepository
from repositories.market_repo import (
    MarketRepository,
    get_market_repository,
    invalidate_market_caches,
)
from repositories.subgroup_repo import SubgroupRepository, get_subgroup_repository
from repositories.region_repo import (
    RegionRepository,
    get_region_repository,
    invalidate_region_caches,
)

__all__ = [
    "ApiError",
    "BaseRepository",
    "MarketRepository",
    "get_market_repository",
    "invalidate_market_caches",
    "SubgroupRepository",
    "get_subgroup_repository",
    "RegionRepository",
    "get_region_repository",
    "invalidate_region_caches",
]
