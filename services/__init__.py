"""
Services Package

This package contains service modules that implement business logic
using clean architecture patterns.

Each service module follows these principles:
1. Single Responsibility - one concern per service
2. Dependency Injection - repositories and collaborators passed in, not created
3. Dataclasses - structured domain models and results
4. No Streamlit imports - UI concerns live in state/, ui/ and pages/

Available Services:
- SubgroupRowSet: Row-set validator for the subgroup section of the market form
- MarketFormService: Create/edit market form state, rules and submission
- MarketListService: Market list paging, search, table shaping and deletion
"""

# -----------------------------------------------------------------------------
# Subgroup rows
# -----------------------------------------------------------------------------
from services.subgroup_row_service import (
    SubgroupRowSet,
    RowSetChange,
    DELETE_CONFIRM_MESSAGE,
    CLEAR_CONFIRM_MESSAGE,
    LOAD_FAILED_MESSAGE,
)

# -----------------------------------------------------------------------------
# Market form
# -----------------------------------------------------------------------------
from services.market_form_service import (
    MarketFormService,
    SubmitResult,
)

# -----------------------------------------------------------------------------
# Market list
# -----------------------------------------------------------------------------
from services.market_list_service import (
    MarketListService,
    get_market_list_service,
    SORT_FIELDS,
)

__all__ = [
    # === Subgroup rows ===
    'SubgroupRowSet',
    'RowSetChange',
    'DELETE_CONFIRM_MESSAGE',
    'CLEAR_CONFIRM_MESSAGE',
    'LOAD_FAILED_MESSAGE',

    # === Market form ===
    'MarketFormService',
    'SubmitResult',

    # === Market list ===
    'MarketListService',
    'get_market_list_service',
    'SORT_FIELDS',
]
