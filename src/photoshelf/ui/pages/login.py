"""Login page for photoshelf."""

import streamlit as st
import structlog

from ..handlers.auth import handle_login
from ..handlers.session import SessionServices
from ..state import GalleryViewState

logger = structlog.get_logger(__name__)


def render_login_page(view_state: GalleryViewState, services: SessionServices) -> None:
    """Render the email/password sign-in form."""
    col1, col2, col3 = st.columns([1, 2, 1])

    with col2:
        st.markdown("### 🔐 Sign in")

        with st.form("login_form"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Login", use_container_width=True, type="primary")

        if submitted:
            error_message = handle_login(view_state, services.auth, email.strip(), password)
            if error_message:
                st.error(error_message)
            else:
                logger.info("login_page_signed_in")
                st.rerun()
