"""
Market Rules

Pure functions for the market form: code normalization, long code
derivation, field validation and the subgroup submit ordering.
No Streamlit or infrastructure dependencies, domain layer only.
"""

import re
from typing import Optional

from domain.enums import MarketViolation

MARKET_CODE_LENGTH = 2
MIN_LONG_CODE_LENGTH = 7
MAX_LONG_CODE_LENGTH = 20
LONG_CODE_FILLER = "XXXX"

MARKET_CODE_PATTERN = re.compile(r"^[A-Za-z]+$")
SUBGROUP_CODE_PATTERN = re.compile(r"^[A-Za-z0-9]$")


def normalize_market_code(code: Optional[str]) -> str:
    """Strip and uppercase a market code ("" for None)."""
    return (code or "").strip().upper()


def build_long_code(region_name: Optional[str], market_code: Optional[str]) -> str:
    """Derive the long market code from the region name and market code.

    Examples:
        >>> build_long_code("Europe", "bb")
        'EXXXXBB'
        >>> build_long_code("Europe", "B")
        'E'
        >>> build_long_code(None, "BB")
        ''
    """
    if not region_name:
        return ""
    initial = region_name[:1].upper()
    code = normalize_market_code(market_code)
    if len(code) == MARKET_CODE_LENGTH:
        return f"{initial}{LONG_CODE_FILLER}{code}"
    return initial


def validate_market_fields(
    name: Optional[str],
    code: Optional[str],
    long_code: Optional[str],
    region: Optional[str],
) -> set[MarketViolation]:
    """Validate the market form fields (uniqueness is checked by the service).

    Returns:
        Set of MarketViolation, empty when the fields are valid.
    """
    violations: set[MarketViolation] = set()

    if not (name or "").strip():
        violations.add(MarketViolation.REQUIRED_NAME)

    code = (code or "").strip()
    if not code:
        violations.add(MarketViolation.REQUIRED_CODE)
    else:
        if len(code) != MARKET_CODE_LENGTH:
            violations.add(MarketViolation.INVALID_CODE_LENGTH)
        if not MARKET_CODE_PATTERN.fullmatch(code):
            violations.add(MarketViolation.INVALID_CODE_FORMAT)

    if not str(region or "").strip():
        violations.add(MarketViolation.REQUIRED_REGION)

    long_len = len(long_code or "")
    if not MIN_LONG_CODE_LENGTH <= long_len <= MAX_LONG_CODE_LENGTH:
        violations.add(MarketViolation.INVALID_LONG_CODE)

    return violations


def subgroup_sort_key(subgroup_code: str) -> tuple[int, int, str]:
    """Sort key putting numeric subgroup codes first, then letters.

    Example:
        >>> sorted(["B", "2", "A", "10"], key=subgroup_sort_key)
        ['2', '10', 'A', 'B']
    """
    if subgroup_code.isascii() and subgroup_code.isdigit():
        return (0, int(subgroup_code), "")
    return (1, 0, subgroup_code)
