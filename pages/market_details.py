"""
Market Details Page

Read-only view of the selected market and its subgroups, with edit and
delete actions.
"""

import pandas as pd
import streamlit as st

from logging_config import setup_logging
from services import get_market_list_service
from state import get_selected_market_id, open_edit_form, ss_clear, ss_get, ss_set
from state.form_state import SELECTED_MARKET_KEY
from ui.confirm import get_confirmation
from ui.notify import flash

logger = setup_logging(__name__, log_file="market_details.log")

service = get_market_list_service()

LIST_PAGE = "pages/market_list.py"
DELETED_KEY = "market_details_deleted"
DELETE_MARKET_MESSAGE = "Are you sure you want to delete this market?"


def render_subgroups(market):
    if not market.subgroups:
        st.info("This market has no subgroups.")
        return
    df = pd.DataFrame(
        [
            {"Code": row.formatted_code, "Subgroup Name": row.subgroup_name}
            for row in market.subgroups
        ]
    )
    st.dataframe(df, hide_index=True, use_container_width=True)


def main():
    if ss_get(DELETED_KEY):
        ss_clear(DELETED_KEY)
        st.switch_page(LIST_PAGE)

    market_id = get_selected_market_id()
    if market_id is None:
        st.warning("Select a market on the Markets page first.")
        if st.button("Back to markets"):
            st.switch_page(LIST_PAGE)
        return

    scope = f"details-{market_id}"
    confirmation = get_confirmation(scope)
    market = service.get_market_details(market_id)
    if market is None:
        st.error("An error occurred while loading the market")
        return

    st.title(f"🏪 {market.name}")
    region_names = service.region_names()
    subregion_names = service.subregion_names()

    cols = st.columns(4)
    cols[0].metric("Code", market.code)
    cols[1].metric("Long Code", market.long_code or "-")
    cols[2].metric("Region", region_names.get(market.region, market.region) or "-")
    cols[3].metric("Sub Region", subregion_names.get(market.sub_region, market.sub_region) or "-")

    st.subheader("Subgroups")
    render_subgroups(market)

    st.divider()
    edit_col, delete_col, back_col = st.columns(3)
    if edit_col.button("✏️ Edit", use_container_width=True):
        open_edit_form(market_id)
        st.switch_page("pages/market_form.py")

    if delete_col.button("🗑️ Delete", use_container_width=True):
        def _delete():
            if not confirmation(DELETE_MARKET_MESSAGE):
                return
            if service.delete_market(market_id):
                flash("Market deleted successfully")
                ss_clear(SELECTED_MARKET_KEY)
                ss_set(DELETED_KEY, True)
            else:
                flash("An error occurred while deleting the market", ok=False)

        confirmation.run(_delete)
        st.rerun()

    if back_col.button("Back to markets", use_container_width=True):
        st.switch_page(LIST_PAGE)

    confirmation.render()


if __name__ == "__main__":
    main()
