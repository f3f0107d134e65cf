"""
Market Form State

Keeps one MarketFormService per form session ("create" or "edit-<id>") in
session state so the row set survives Streamlit reruns, and tracks which
market the list/details/form pages are working on.
"""

from typing import Optional

import streamlit as st

from state.session_state import ss_clear, ss_clear_scope, ss_get, ss_set

SELECTED_MARKET_KEY = "selected_market_id"
FORM_MODE_KEY = "market_form_mode"
_FORM_SERVICE_PREFIX = "market_form_service"

MODE_CREATE = "create"
MODE_EDIT = "edit"


def form_scope(market_id: Optional[int]) -> str:
    """Session scope for a form: 'create' or 'edit-<id>'."""
    return MODE_CREATE if market_id is None else f"{MODE_EDIT}-{market_id}"


def get_selected_market_id() -> Optional[int]:
    return ss_get(SELECTED_MARKET_KEY)


def open_create_form() -> None:
    """Point the form page at a fresh create session."""
    reset_form_session(None)
    ss_set(FORM_MODE_KEY, MODE_CREATE)
    ss_clear(SELECTED_MARKET_KEY)


def open_edit_form(market_id: int) -> None:
    """Point the form page at a fresh edit session for market_id."""
    reset_form_session(market_id)
    ss_set(FORM_MODE_KEY, MODE_EDIT)
    ss_set(SELECTED_MARKET_KEY, market_id)


def select_market(market_id: int) -> None:
    ss_set(SELECTED_MARKET_KEY, market_id)


def current_form_market_id() -> Optional[int]:
    """Market id of the active form session, None in create mode."""
    if ss_get(FORM_MODE_KEY, MODE_CREATE) == MODE_EDIT:
        return get_selected_market_id()
    return None


def get_form_service(market_id: Optional[int]):
    """Get or start the MarketFormService for this form session."""
    scope = form_scope(market_id)
    key = f"{_FORM_SERVICE_PREFIX}:{scope}"
    if key not in st.session_state:
        from repositories import get_market_repository, get_region_repository, get_subgroup_repository
        from services.market_form_service import MarketFormService
        from ui.confirm import get_confirmation
        from ui.notify import toast_notify

        service = MarketFormService(
            get_market_repository(),
            get_subgroup_repository(),
            get_region_repository(),
            confirm=get_confirmation(scope),
            notify=toast_notify,
        )
        if market_id is None:
            service.start_create()
        else:
            service.start_edit(market_id)
        st.session_state[key] = service
    return st.session_state[key]


def reset_form_session(market_id: Optional[int]) -> None:
    """Forget the form service and every widget key of the session."""
    scope = form_scope(market_id)
    ss_clear(f"{_FORM_SERVICE_PREFIX}:{scope}")
    ss_clear_scope(scope)
