"""
Notifications

Passive user notifications. toast_notify() is the notify collaborator
handed to services; flash()/show_flash() carry a message across
st.switch_page() (e.g. "Market created successfully" on the list page).
"""

import streamlit as st

from state.session_state import ss_clear, ss_get, ss_set

_FLASH_KEY = "flash_message"


def toast_notify(message: str) -> None:
    st.toast(message, icon="⚠️")


def flash(message: str, ok: bool = True) -> None:
    """Queue a message for the next page render."""
    ss_set(_FLASH_KEY, (message, ok))


def show_flash() -> None:
    """Show and consume a queued flash message, if any."""
    queued = ss_get(_FLASH_KEY)
    if not queued:
        return
    ss_clear(_FLASH_KEY)
    message, ok = queued
    if ok:
        st.success(message)
    else:
        st.error(message)
