"""
Session State Utilities

Thin helpers over st.session_state used by the pages and by the confirm
dialog. Keys are plain strings; form-session keys are built with
scoped_key() so the create form and each edit form never share widgets.
"""

import streamlit as st
from typing import TypeVar, Any, Optional

T = TypeVar('T')


def scoped_key(scope: str, *parts) -> str:
    """Build a namespaced session key, e.g. scoped_key('edit-4', 'row-2', 'code')."""
    return ":".join([scope, *(str(p) for p in parts)])


def ss_get(key: str, default: T = None) -> Optional[T]:
    """Get value from session_state if it exists and is not None, else default."""
    val = st.session_state.get(key)
    return default if val is None else val


def ss_has(*keys: str) -> bool:
    """True if all keys exist in session_state and are not None."""
    return all(st.session_state.get(key) is not None for key in keys)


def ss_init(defaults: dict[str, Any]) -> None:
    """Initialize session_state keys that are not set yet."""
    for key, default in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = default


def ss_set(key: str, value: Any) -> None:
    st.session_state[key] = value


def ss_clear(*keys: str) -> None:
    """Remove the given keys from session_state (missing keys are ignored)."""
    for key in keys:
        st.session_state.pop(key, None)


def ss_clear_scope(scope: str) -> None:
    """Remove every key created with scoped_key(scope, ...)."""
    prefix = f"{scope}:"
    for key in [k for k in st.session_state.keys() if str(k).startswith(prefix)]:
        del st.session_state[key]
