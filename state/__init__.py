"""
State Management Module

Centralized state management for Streamlit session state.
This module belongs in the presentation layer and provides:
- Session state utilities (ss_get, ss_has, ss_init, ss_set, ss_clear, scoped_key)
- Service registry for session-scoped singletons (get_service, register_service, clear_services)
- Market form sessions (get_form_service, open_create_form, open_edit_form)

Usage:
    from state import ss_get, ss_init
    from state import get_service
    from state import get_form_service
"""

from state.session_state import ss_get, ss_has, ss_init, ss_set, ss_clear, ss_clear_scope, scoped_key
from state.service_registry import get_service, register_service, clear_services, has_service
from state.form_state import (
    get_form_service,
    reset_form_session,
    open_create_form,
    open_edit_form,
    select_market,
    get_selected_market_id,
    current_form_market_id,
    form_scope,
)

__all__ = [
    # Session state utilities
    'ss_get',
    'ss_has',
    'ss_init',
    'ss_set',
    'ss_clear',
    'ss_clear_scope',
    'scoped_key',
    # Service registry
    'get_service',
    'register_service',
    'clear_services',
    'has_service',
    # Market form sessions
    'get_form_service',
    'reset_form_session',
    'open_create_form',
    'open_edit_form',
    'select_market',
    'get_selected_market_id',
    'current_form_market_id',
    'form_scope',
]
