"""
Main Streamlit application for photoshelf.

This is the entry point for the gallery web application:

    streamlit run src/photoshelf/main.py
"""

from datetime import datetime

import streamlit as st

from photoshelf.config import load_env_file
from photoshelf.error_handling import ConfigurationError
from photoshelf.logging_config import configure_structured_logging, get_logger
from photoshelf.ui.components.common import render_error_message, render_header
from photoshelf.ui.handlers.auth import handle_logout, restore_session, subscribe_to_auth_changes
from photoshelf.ui.handlers.session import get_session_services
from photoshelf.ui.pages.gallery import render_gallery_page
from photoshelf.ui.pages.login import render_login_page
from photoshelf.ui.state import get_view_state

configure_structured_logging()
logger = get_logger(__name__)


def main() -> None:
    """Main application entry point."""
    st.set_page_config(
        page_title="photoshelf",
        page_icon="📸",
        layout="wide",
        menu_items={
            "Get Help": None,
            "Report a bug": None,
            "About": "photoshelf - month-by-month photo gallery",
        },
    )

    load_env_file()

    try:
        services = get_session_services(st.session_state)
    except ConfigurationError as e:
        render_error_message("Configuration Error", e.user_message, str(e))
        return

    view_state = get_view_state(st.session_state, datetime.now(services.tz), services.tz)
    subscribe_to_auth_changes(st.session_state, view_state, services.auth)
    restore_session(view_state, services.auth)

    email = view_state.user.email if view_state.user else None
    if render_header(email if view_state.is_authenticated else None):
        error_message = handle_logout(view_state, services.auth)
        if error_message:
            st.error(error_message)
        else:
            st.rerun()

    logger.debug(
        "session_rendered",
        authenticated=view_state.is_authenticated,
        month=str(view_state.current_month),
    )

    if not view_state.is_authenticated:
        render_login_page(view_state, services)
        return

    try:
        render_gallery_page(view_state, services)
    except Exception as e:
        logger.error("critical_application_error", error=str(e))
        render_error_message("Application Error", "Something went wrong while rendering the gallery.", str(e))
        if st.button("🔄 Reload", type="primary"):
            view_state.needs_reload = True
            st.rerun()


if __name__ == "__main__":
    main()
