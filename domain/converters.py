"""
Type Conversion Utilities for Domain Model Factories

Safe conversion helpers used by the ``from_api`` factories in domain.models.
Backend payloads are JSON, but the market list also round-trips through
pandas DataFrames, so null checks go through pd.isna() to cover None, NaN
and pd.NA alike.

Usage:
    ```python
    from domain.converters import safe_int, safe_optional_int, safe_upper

    market_id = safe_optional_int(payload.get('id'))   # None if missing
    code = safe_upper(payload.get('code'))             # "" if missing
    ```
"""

import pandas as pd


def _is_null(value) -> bool:
    # pd.isna on a list/dict returns an array, only scalars are checked
    if isinstance(value, (list, tuple, dict, set)):
        return False
    return bool(pd.isna(value))


def safe_int(value, default: int = 0) -> int:
    """
    Convert value to int, returning default if null or unparsable.

    Examples:
        >>> safe_int(42)
        42
        >>> safe_int(None)
        0
        >>> safe_int("7")
        7
        >>> safe_int("x", default=-1)
        -1
    """
    if _is_null(value):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def safe_optional_int(value) -> int | None:
    """
    Convert value to int, or None when null, unparsable, or zero.

    The backend uses 0 as the "not yet persisted" identifier, so zero maps
    to None here.

    Examples:
        >>> safe_optional_int(12)
        12
        >>> safe_optional_int(0) is None
        True
        >>> safe_optional_int(None) is None
        True
    """
    result = safe_int(value, 0)
    return result or None


def safe_str(value, default: str = "") -> str:
    """
    Convert value to str, returning default if null.

    Examples:
        >>> safe_str("hello")
        'hello'
        >>> safe_str(None)
        ''
        >>> safe_str(3)
        '3'
    """
    if _is_null(value):
        return default
    return str(value)


def safe_upper(value, default: str = "") -> str:
    """Convert value to a stripped, uppercased str ("" if null)."""
    return safe_str(value, default).strip().upper()
