"""
UI Formatting Utilities

Helper functions for consistent display formatting across the pages.

Design Principles:
- Pure functions with no side effects
- Use domain enums (RegionCode, SubgroupViolation, RowState) for business logic
- Return simple types (str, tuple) for flexibility
"""

from typing import Iterable, Optional

from domain.enums import MarketViolation, RegionCode, RowState, SubgroupField, SubgroupViolation
from domain.models import Market, Region


def format_region_label(region: Region) -> str:
    """
    Label for a region picker.

    Uses the built-in full form ('EURO - Europe') when the key is known,
    otherwise the API name.
    """
    try:
        return RegionCode.from_key(region.key).full_form
    except ValueError:
        return region.value


def format_subgroup_codes(market: Market) -> str:
    """Formatted subgroup codes joined by spaces, e.g. 'BBA BB1'."""
    return " ".join(market.formatted_subgroup_codes)


def format_violations(violations: Iterable[SubgroupViolation], field: Optional[SubgroupField] = None) -> str:
    """
    Join violation messages, optionally only those shown under one field.

    Args:
        violations: Violations of one row
        field: Restrict to violations displayed under this field

    Returns:
        Messages separated by spaces, "" if none
    """
    selected = [v for v in violations if field is None or v.field is field]
    return " ".join(v.message for v in sorted(selected, key=lambda v: v.value))


def format_market_violations(violations: Iterable[MarketViolation]) -> list[str]:
    """Market form messages in a stable order."""
    return [v.message for v in sorted(violations, key=lambda v: v.value)]


def get_row_state_badge(state: RowState) -> tuple[str, str]:
    """
    Badge label and color for a subgroup row state.

    Returns:
        Tuple of (label, color) for st.badge()
    """
    return {
        RowState.NEW: ("New", "blue"),
        RowState.PERSISTED: ("Saved", "gray"),
        RowState.EDITED: ("Edited", "orange"),
        RowState.DELETED: ("Deleted", "red"),
    }[state]


def format_page_caption(page: int, page_size: int, total: int) -> str:
    """'Showing 11 to 20 of 42 markets' (page is 0-based)."""
    if total <= 0:
        return "No markets found"
    first = page * page_size + 1
    last = min((page + 1) * page_size, total)
    return f"Showing {first} to {last} of {total} markets"
