"""
Domain Models Package

Core domain models for the market administration app. Plain dataclasses,
enums and pure rule functions with no Streamlit or HTTP dependencies.

Key Components:
- Enums: RegionCode, SubgroupField, SubgroupViolation, RowState, MarketViolation
- Models: SubgroupRow, PersistedSubgroup, Region, Market, MarketPage
- Rules: long code derivation, market field validation, submit ordering
"""

from domain.enums import (
    MarketViolation,
    RegionCode,
    RowState,
    SubgroupField,
    SubgroupViolation,
)
from domain.models import (
    Market,
    MarketPage,
    PersistedSubgroup,
    Region,
    SubgroupRow,
)
from domain.market_rules import (
    build_long_code,
    normalize_market_code,
    subgroup_sort_key,
    validate_market_fields,
)

__all__ = [
    # Enums
    "MarketViolation",
    "RegionCode",
    "RowState",
    "SubgroupField",
    "SubgroupViolation",
    # Models
    "Market",
    "MarketPage",
    "PersistedSubgroup",
    "Region",
    "SubgroupRow",
    # Rules
    "build_long_code",
    "normalize_market_code",
    "subgroup_sort_key",
    "validate_market_fields",
]
