"""
Market Form Page

Create or edit a market: name, two-letter code, region and sub-region, a
derived long code, and the editable subgroup rows. All rules live in
MarketFormService; this page only binds widgets to it.
"""

import streamlit as st

from logging_config import setup_logging
from state import current_form_market_id, form_scope, get_form_service, reset_form_session, scoped_key, ss_get, ss_set, ss_clear
from ui.confirm import get_confirmation
from ui.formatters import format_market_violations, format_region_label
from ui.notify import flash
from ui.subgroup_editor import render_subgroup_editor

logger = setup_logging(__name__, log_file="market_form.log")

LIST_PAGE = "pages/market_list.py"


def _leave_form(market_id, message=None, ok=True):
    if message:
        flash(message, ok)
    reset_form_session(market_id)
    st.switch_page(LIST_PAGE)


def _on_name_change(form, key):
    form.set_name(ss_get(key, ""))


def _on_code_change(form, key):
    form.set_market_code(ss_get(key, ""))
    ss_set(key, form.code)


def _on_region_change(form, key):
    form.set_region(ss_get(key))


def _on_sub_region_change(form, key):
    form.set_sub_region(ss_get(key))


def render_market_fields(form, scope):
    """Name, code, region, sub-region and long code inputs."""
    name_key = scoped_key(scope, "name")
    code_key = scoped_key(scope, "code")
    region_key = scoped_key(scope, "region")
    sub_region_key = scoped_key(scope, "sub_region")

    ss_set(name_key, form.name)
    ss_set(code_key, form.code)

    left, right = st.columns(2)
    left.text_input(
        "Market Name *", key=name_key, on_change=_on_name_change, args=(form, name_key)
    )
    right.text_input(
        "Market Code *",
        key=code_key,
        max_chars=2,
        help="Two letters",
        on_change=_on_code_change,
        args=(form, code_key),
    )

    labels = {str(r.key): format_region_label(r) for r in form.regions}
    region_options = list(labels)
    st.radio(
        "Region *",
        options=region_options,
        format_func=lambda k: labels[k],
        index=None if form.region not in labels else region_options.index(form.region),
        key=region_key,
        horizontal=True,
        on_change=_on_region_change,
        args=(form, region_key),
    )

    sub_labels = {str(r.key): r.value for r in form.subregions}
    if sub_labels:
        sub_options = list(sub_labels)
        st.selectbox(
            "Sub Region",
            options=sub_options,
            format_func=lambda k: sub_labels[k],
            index=sub_options.index(form.sub_region) if form.sub_region in sub_labels else None,
            key=sub_region_key,
            on_change=_on_sub_region_change,
            args=(form, sub_region_key),
        )

    st.text_input("Long Market Code", value=form.long_code, disabled=True, key=scoped_key(scope, "long_code"))


def render_violations(form):
    messages = format_market_violations(form.violations())
    for message in messages:
        st.caption(f":red[{message}]")


def main():
    market_id = current_form_market_id()
    scope = form_scope(market_id)
    confirmation = get_confirmation(scope)
    form = get_form_service(market_id)

    leave_key = scoped_key(scope, "leave")
    if ss_get(leave_key):
        ss_clear(leave_key)
        _leave_form(market_id)

    st.title(f"🏪 {form.title}")
    if not form.loaded:
        st.error("The market could not be loaded.")
        if st.button("Back to markets"):
            _leave_form(market_id)
        return

    render_market_fields(form, scope)

    st.divider()
    st.subheader("Subgroups")
    if form.show_subgroups:
        render_subgroup_editor(form, scope, confirmation)
    elif st.button("➕ Add subgroups", key=scoped_key(scope, "show-subgroups")):
        form.show_subgroup_section()
        st.rerun()

    st.divider()
    render_violations(form)

    submit_col, cancel_col = st.columns(2)
    if submit_col.button(form.submit_label, type="primary", disabled=not form.is_valid, use_container_width=True):
        result = form.submit()
        if result.ok:
            _leave_form(market_id, result.message)
        else:
            st.error(result.message)

    if cancel_col.button("Cancel", use_container_width=True):
        def _cancel():
            if form.cancel():
                ss_set(leave_key, True)

        confirmation.run(_cancel)
        st.rerun()

    confirmation.render()


if __name__ == "__main__":
    main()
