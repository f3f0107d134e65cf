"""
Market Admin

Streamlit entry point: `streamlit run app.py`.
"""

import streamlit as st

from logging_config import setup_logging
from settings_service import SettingsService

logger = setup_logging(__name__)


def main():
    st.set_page_config(page_title="Market Admin", page_icon="🏬", layout="wide")
    settings = SettingsService()
    logger.info(f"Starting market admin ({settings.env}) against {settings.api_base_url}")

    pages = [
        st.Page("pages/market_list.py", title="Markets", icon="🏬", default=True),
        st.Page("pages/market_details.py", title="Market Details", icon="🔎"),
        st.Page("pages/market_form.py", title="Market Form", icon="✏️"),
    ]
    st.navigation(pages).run()


if __name__ == "__main__":
    main()
