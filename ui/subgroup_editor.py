"""
Subgroup Editor

Renders the editable subgroup rows of the market form. Each row shows the
market code (read-only), a one-character subgroup code, a name, the row's
violation messages and a delete button. Widget values are written back to
the row set through on_change callbacks, so every keystroke commit goes
through SubgroupRowSet.update_field() and re-validates the whole set.
"""

from typing import Optional

import streamlit as st

from domain.enums import SubgroupField
from logging_config import setup_logging
from state.session_state import scoped_key, ss_get, ss_set
from ui.confirm import DialogConfirmation
from ui.formatters import format_violations, get_row_state_badge

logger = setup_logging(__name__, log_file="subgroup_editor.log")


def _row_index(form, row_key: str) -> Optional[int]:
    for index, row in enumerate(form.rows.rows):
        if row.key == row_key:
            return index
    return None


def _on_field_change(form, widget_key: str, row_key: str, field: SubgroupField) -> None:
    index = _row_index(form, row_key)
    if index is None:
        logger.debug(f"Row {row_key} no longer exists, ignoring edit")
        return
    value = ss_get(widget_key, "")
    form.rows.update_field(index, field, value)
    ss_set(widget_key, (value or "").upper())


def _on_delete(form, confirmation: DialogConfirmation, row_key: str) -> None:
    def _delete():
        index = _row_index(form, row_key)
        if index is not None:
            form.rows.delete_row(index)

    confirmation.run(_delete)


def _on_add(form) -> None:
    if form.rows.can_add_new_row():
        form.rows.add_row()


def render_subgroup_editor(form, scope: str, confirmation: DialogConfirmation) -> None:
    """Render the subgroup rows of a MarketFormService.

    Args:
        form: MarketFormService owning the row set
        scope: Form session scope used for widget keys
        confirmation: Dialog used for row deletion
    """
    header = st.columns([1, 1, 4, 1, 1])
    header[0].markdown("**Market**")
    header[1].markdown("**Code**")
    header[2].markdown("**Subgroup Name**")
    header[3].markdown("**State**")

    for index, row in form.rows.active_rows:
        code_key = scoped_key(scope, row.key, "code")
        name_key = scoped_key(scope, row.key, "name")
        # Row values are authoritative; clear/cancel and market code changes
        # update rows outside the widgets.
        ss_set(code_key, row.subgroup_code)
        ss_set(name_key, row.subgroup_name)

        violations = form.rows.violations(index)
        cols = st.columns([1, 1, 4, 1, 1])
        cols[0].markdown(f"`{row.market_code or '--'}`")
        cols[1].text_input(
            "Code",
            key=code_key,
            max_chars=1,
            label_visibility="collapsed",
            on_change=_on_field_change,
            args=(form, code_key, row.key, SubgroupField.SUBGROUP_CODE),
        )
        cols[2].text_input(
            "Subgroup Name",
            key=name_key,
            label_visibility="collapsed",
            on_change=_on_field_change,
            args=(form, name_key, row.key, SubgroupField.SUBGROUP_NAME),
        )
        label, color = get_row_state_badge(row.state)
        cols[3].badge(label, color=color)
        cols[4].button(
            "🗑️",
            key=scoped_key(scope, row.key, "delete"),
            help="Delete subgroup",
            on_click=_on_delete,
            args=(form, confirmation, row.key),
        )

        code_errors = format_violations(violations, SubgroupField.SUBGROUP_CODE)
        name_errors = format_violations(violations, SubgroupField.SUBGROUP_NAME)
        if code_errors or name_errors:
            err_cols = st.columns([1, 1, 4, 2])
            if code_errors:
                err_cols[1].caption(f":red[{code_errors}]")
            if name_errors:
                err_cols[2].caption(f":red[{name_errors}]")

    st.button(
        "➕ Add subgroup",
        key=scoped_key(scope, "add-subgroup"),
        disabled=not form.rows.can_add_new_row(),
        on_click=_on_add,
        args=(form,),
    )
