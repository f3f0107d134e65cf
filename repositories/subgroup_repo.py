"""
Subgroup Repository

Access to the MarketSubgroup endpoints. Supplies both the rows of one
market (for the row-set validator) and the full persisted list used as the
uniqueness cross-check source.
"""

from typing import Optional
import logging

from config import ApiConfig, SUBGROUP_PATH, get_api_config
from domain.models import PersistedSubgroup, SubgroupRow
from logging_config import setup_logging
from repositories.base import BaseRepository

logger = setup_logging(__name__, log_file="subgroup_repo.log")


class SubgroupRepository(BaseRepository):
    """Repository for the MarketSubgroup endpoints. Not cached: the form
    always needs the current backend state."""

    def __init__(self, api: ApiConfig, session=None, logger_instance: Optional[logging.Logger] = None):
        super().__init__(api, session, logger_instance)

    def get_subgroups(self, market_id: int, market_code: str = "") -> list[SubgroupRow]:
        """Get the persisted subgroups of one market as editable rows."""
        payload = self._get(SUBGROUP_PATH, params={"marketId": market_id}) or []
        rows = [SubgroupRow.from_api(item, market_code=market_code) for item in payload]
        for row in rows:
            if row.market_identifier is None:
                row.market_identifier = market_id
        logger.debug(f"Loaded {len(rows)} subgroups for market {market_id}")
        return rows

    def list_all(self) -> list[PersistedSubgroup]:
        """Get every persisted subgroup (uniqueness cross-check source)."""
        payload = self._get(SUBGROUP_PATH) or []
        return [PersistedSubgroup.from_api(item) for item in payload]

    def create_subgroup(self, row: SubgroupRow) -> Optional[SubgroupRow]:
        result = self._post(SUBGROUP_PATH, row.to_api())
        return SubgroupRow.from_api(result) if isinstance(result, dict) else None

    def update_subgroup(self, subgroup_id: int, row: SubgroupRow) -> Optional[SubgroupRow]:
        result = self._put(f"{SUBGROUP_PATH}/{subgroup_id}", row.to_api())
        return SubgroupRow.from_api(result) if isinstance(result, dict) else None

    def delete_subgroup(self, subgroup_id: int) -> None:
        self._delete(f"{SUBGROUP_PATH}/{subgroup_id}")


def get_subgroup_repository() -> SubgroupRepository:
    """Get or create a SubgroupRepository instance (session-scoped)."""
    def _create() -> SubgroupRepository:
        return SubgroupRepository(get_api_config())

    try:
        from state import get_service
        return get_service("subgroup_repository", _create)
    except ImportError:
        logger.debug("state module unavailable, creating new SubgroupRepository instance")
        return _create()
