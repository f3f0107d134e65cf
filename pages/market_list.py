"""
Market List Page

Paged table of markets with search, region filter, sorting, and entry
points to view, edit and create markets.

Uses MarketListService for all data operations.
"""

import streamlit as st

from logging_config import setup_logging
from repositories import invalidate_market_caches, invalidate_region_caches
from services import SORT_FIELDS, get_market_list_service
from settings_service import SettingsService
from state import get_selected_market_id, open_create_form, open_edit_form, select_market, ss_get, ss_init, ss_set
from ui.formatters import format_page_caption
from ui.notify import show_flash

logger = setup_logging(__name__, log_file="market_list.log")

# Initialize service (cached in session state)
service = get_market_list_service()
settings = SettingsService()

PAGE_KEY = "market_list_page"
PAGE_SIZE_KEY = "market_list_page_size"
SEARCH_KEY = "market_list_search"


def _reset_paging():
    ss_set(PAGE_KEY, 0)


def _go_to_form(market_id=None):
    if market_id is None:
        open_create_form()
    else:
        open_edit_form(market_id)
    st.switch_page("pages/market_form.py")


def _go_to_details(market_id):
    select_market(market_id)
    st.switch_page("pages/market_details.py")


def render_filters():
    """Sidebar filters. Returns (selected regions, sort field, ascending)."""
    st.sidebar.header("🔍 Filters")
    region_names = service.region_names()
    selected_regions = st.sidebar.multiselect(
        "Region",
        options=sorted(region_names.values()),
        key="market_list_regions",
    )
    sort_labels = {"": "(none)", **SORT_FIELDS}
    sort_field = st.sidebar.selectbox(
        "Sort by",
        options=list(sort_labels),
        format_func=lambda k: sort_labels[k],
        key="market_list_sort",
    )
    ascending = st.sidebar.radio(
        "Order", ["Ascending", "Descending"], horizontal=True, key="market_list_order"
    ) == "Ascending"

    st.sidebar.markdown("---")
    if st.sidebar.button("🔄 Refresh data", use_container_width=True):
        invalidate_market_caches()
        invalidate_region_caches()
        st.rerun()
    return selected_regions, sort_field, ascending


def main():
    ss_init({
        PAGE_KEY: 0,
        PAGE_SIZE_KEY: settings.default_rows,
        SEARCH_KEY: "",
    })

    st.title("🏬 Markets")
    show_flash()

    selected_regions, sort_field, ascending = render_filters()

    top = st.columns([4, 1])
    search_text = top[0].text_input(
        "Search markets",
        key=SEARCH_KEY,
        placeholder="Name, code or long code",
        on_change=_reset_paging,
    )
    if top[1].button("➕ New Market", type="primary", use_container_width=True):
        _go_to_form()

    page = ss_get(PAGE_KEY, 0)
    page_size = ss_get(PAGE_SIZE_KEY, settings.default_rows)

    if search_text.strip():
        matches = service.search(search_text, page, page_size)
        total = len(matches)
        markets = matches[page * page_size:(page + 1) * page_size]
    else:
        market_page = service.get_page(page, page_size)
        markets = list(market_page.markets)
        total = market_page.total_records

    region_names = service.region_names()
    subregion_names = service.subregion_names()
    df = service.to_dataframe(markets, region_names, subregion_names)
    df = service.filter_by_regions(df, selected_regions)
    df = service.sort(df, sort_field, ascending)

    if df.empty:
        st.warning("No markets found.")
    else:
        event = st.dataframe(
            df,
            hide_index=True,
            use_container_width=True,
            on_select="rerun",
            selection_mode="single-row",
            key="market_list_table",
        )
        selected = event.selection.rows if event is not None else []
        if selected:
            select_market(int(df.iloc[selected[0]]["Id"]))

    selected_id = get_selected_market_id()
    actions = st.columns(2)
    if actions[0].button("👁️ View", disabled=selected_id is None, use_container_width=True):
        _go_to_details(selected_id)
    if actions[1].button("✏️ Edit", disabled=selected_id is None, use_container_width=True):
        _go_to_form(selected_id)

    # Paging
    st.caption(format_page_caption(page, page_size, total))
    nav = st.columns([1, 1, 2])
    if nav[0].button("◀ Previous", disabled=page == 0):
        ss_set(PAGE_KEY, page - 1)
        st.rerun()
    if nav[1].button("Next ▶", disabled=(page + 1) * page_size >= total):
        ss_set(PAGE_KEY, page + 1)
        st.rerun()
    nav[2].selectbox(
        "Rows per page",
        options=settings.rows_per_page_options,
        key=PAGE_SIZE_KEY,
        on_change=_reset_paging,
    )

    if not df.empty:
        st.subheader("Markets per Region")
        chart = service.region_chart(df)
        if chart:
            st.plotly_chart(chart)


if __name__ == "__main__":
    main()
