"""
Market List Service

Business logic for the market list and market details pages: paging,
search, region name mapping, DataFrame shaping for the table, region
filters and sorting, the markets-per-region chart, and market deletion.

Design Principles:
1. Dependency Injection - MarketRepository and RegionRepository passed in
2. Pure DataFrame helpers - filter/sort/count work on plain DataFrames
3. Chart creation returns Plotly Figures (not rendered) for the page layer
4. No Streamlit imports (service layer rule)
"""

from typing import Optional

import pandas as pd
import plotly.express as px

from domain.models import Market, MarketPage
from logging_config import setup_logging
from repositories.base import ApiError
from repositories.market_repo import invalidate_market_caches

logger = setup_logging(__name__, log_file="market_list_service.log")

TABLE_COLUMNS = ["Id", "Name", "Code", "Long Code", "Region", "Sub Region", "Subgroups"]

# Sort fields offered by the list page, mapped to DataFrame columns
SORT_FIELDS = {
    "name": "Name",
    "code": "Code",
    "longCode": "Long Code",
    "region": "Region",
    "subRegion": "Sub Region",
}


class MarketListService:
    """Market list/detail logic.

    Args:
        market_repo: MarketRepository instance for data access.
        region_repo: RegionRepository instance for region names.
    """

    def __init__(self, market_repo, region_repo):
        self._repo = market_repo
        self._region_repo = region_repo

    # =====================================================================
    # Data Access Orchestration
    # =====================================================================

    def get_page(self, page: int = 0, page_size: int = 10) -> MarketPage:
        """Get one page of markets; an empty page on API failure."""
        try:
            return self._repo.list_markets(page, page_size)
        except ApiError as e:
            logger.error(f"Error fetching markets: {e}")
            return MarketPage(markets=(), total_records=0)

    def search(self, search_text: str, page: int = 0, page_size: int = 10) -> list[Market]:
        """Search markets; blank text returns the current page unchanged."""
        if not (search_text or "").strip():
            return list(self.get_page(page, page_size).markets)
        try:
            return self._repo.search_markets(search_text.strip())
        except ApiError as e:
            logger.error(f"Error searching markets for '{search_text}': {e}")
            return []

    def get_market_details(self, market_id: int) -> Optional[Market]:
        try:
            return self._repo.get_market(market_id)
        except ApiError as e:
            logger.error(f"Error fetching market details for market ID {market_id}: {e}")
            return None

    def delete_market(self, market_id: int) -> bool:
        """Delete a market and drop the cached list. False on API failure."""
        try:
            self._repo.delete_market(market_id)
        except ApiError as e:
            logger.error(f"Error deleting market {market_id}: {e}")
            return False
        invalidate_market_caches()
        logger.info(f"Market {market_id} deleted")
        return True

    def region_names(self) -> dict[str, str]:
        """Region key (as str) -> region name."""
        return {str(r.key): r.value for r in self._region_repo.get_all_regions()}

    def subregion_names(self) -> dict[str, str]:
        """Sub-region key (as str) -> sub-region name, across all regions."""
        names: dict[str, str] = {}
        for region in self._region_repo.get_all_regions():
            for sub in self._region_repo.get_subregions(region.key):
                names[str(sub.key)] = sub.value
        return names

    # =====================================================================
    # DataFrame shaping
    # =====================================================================

    def to_dataframe(
        self,
        markets: list[Market],
        region_names: Optional[dict[str, str]] = None,
        subregion_names: Optional[dict[str, str]] = None,
    ) -> pd.DataFrame:
        """Build the market table. Unknown region keys are shown as-is."""
        region_names = region_names or {}
        subregion_names = subregion_names or {}
        records = [
            {
                "Id": m.identifier,
                "Name": m.name,
                "Code": m.code,
                "Long Code": m.long_code,
                "Region": region_names.get(m.region, m.region),
                "Sub Region": subregion_names.get(m.sub_region, m.sub_region),
                "Subgroups": " ".join(m.formatted_subgroup_codes),
            }
            for m in markets
        ]
        return pd.DataFrame(records, columns=TABLE_COLUMNS)

    @staticmethod
    def filter_by_regions(df: pd.DataFrame, region_names: Optional[list[str]]) -> pd.DataFrame:
        """Keep rows whose Region is in region_names (no filter if empty)."""
        if df.empty or not region_names:
            return df
        return df[df["Region"].isin(region_names)].reset_index(drop=True)

    @staticmethod
    def sort(df: pd.DataFrame, field: Optional[str], ascending: bool = True) -> pd.DataFrame:
        """Sort by a list field name (see SORT_FIELDS) or a column name."""
        if df.empty or not field:
            return df
        column = SORT_FIELDS.get(field, field)
        if column not in df.columns:
            logger.debug(f"Ignoring unknown sort field '{field}'")
            return df
        return df.sort_values(
            column, ascending=ascending, key=lambda s: s.astype(str).str.lower()
        ).reset_index(drop=True)

    @staticmethod
    def region_counts(df: pd.DataFrame) -> pd.DataFrame:
        """Number of markets per region, largest first."""
        if df.empty:
            return pd.DataFrame(columns=["Region", "Markets"])
        counts = df.groupby("Region").size().reset_index(name="Markets")
        return counts.sort_values(["Markets", "Region"], ascending=[False, True]).reset_index(drop=True)

    def region_chart(self, df: pd.DataFrame):
        """Bar chart of markets per region, or None for an empty table."""
        counts = self.region_counts(df)
        if counts.empty:
            return None
        fig = px.bar(
            counts,
            x="Region",
            y="Markets",
            title="Markets per Region",
            color="Region",
            color_discrete_sequence=px.colors.qualitative.Set2,
        )
        fig.update_layout(showlegend=False, height=320, yaxis={"dtick": 1})
        return fig


# =============================================================================
# Factory Function
# =============================================================================

def get_market_list_service() -> MarketListService:
    """Get or create a MarketListService instance.

    Uses state.get_service for session state persistence across reruns.
    Falls back to direct instantiation if state module unavailable.
    """
    def _create() -> MarketListService:
        from repositories.market_repo import get_market_repository
        from repositories.region_repo import get_region_repository
        return MarketListService(get_market_repository(), get_region_repository())

    try:
        from state import get_service
        return get_service("market_list_service", _create)
    except ImportError:
        logger.debug("state module unavailable, creating new MarketListService")
        return _create()
