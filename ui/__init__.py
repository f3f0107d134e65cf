"""
UI Package

Presentation layer components for Streamlit pages.
Contains the confirmation dialog, notifications, formatting utilities and
the subgroup row editor.

This package separates UI-specific concerns from business logic,
keeping page files focused on layout and user interaction.
"""

from ui.confirm import DialogConfirmation, get_confirmation
from ui.formatters import (
    format_region_label,
    format_subgroup_codes,
    format_violations,
    format_market_violations,
    get_row_state_badge,
    format_page_caption,
)
from ui.notify import toast_notify, flash, show_flash
from ui.subgroup_editor import render_subgroup_editor

__all__ = [
    # Confirmation
    "DialogConfirmation",
    "get_confirmation",
    # Formatters
    "format_region_label",
    "format_subgroup_codes",
    "format_violations",
    "format_market_violations",
    "get_row_state_badge",
    "format_page_caption",
    # Notifications
    "toast_notify",
    "flash",
    "show_flash",
    # Editor
    "render_subgroup_editor",
]
