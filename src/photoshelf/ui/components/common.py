"""Reusable UI components for photoshelf."""

import streamlit as st
import structlog

logger = structlog.get_logger(__name__)

TOAST_ICONS = {"success": "✅", "error": "⚠️", "warning": "🚫", "info": "ℹ️"}
TOAST_QUEUE_KEY = "pending_toasts"
SIZE_UNITS = ("B", "KB", "MB", "GB")


def render_header(email: str | None = None) -> bool:
    """
    Title bar. With a signed-in ``email`` it also shows a logout button.

    Returns:
        bool: True if logout was pressed on this run
    """
    title_col, account_col = st.columns([4, 1])
    title_col.markdown("# 📸 photoshelf")

    logout_pressed = False
    if email is not None:
        with account_col:
            st.caption(email)
            logout_pressed = st.button("Logout", use_container_width=True)

    st.divider()
    return logout_pressed


def render_empty_state(title: str, description: str, icon: str = "🖼️") -> None:
    """Centered placeholder shown instead of an empty grid."""
    _, center, _ = st.columns([1, 2, 1])
    center.markdown(
        f"<div style='text-align: center; padding: 2rem 0; color: #777;'>"
        f"<div style='font-size: 4rem;'>{icon}</div>"
        f"<h3>{title}</h3><p>{description}</p></div>",
        unsafe_allow_html=True,
    )


def render_error_message(error_type: str, message: str, details: str | None = None) -> None:
    """Error box with an optional collapsed technical detail."""
    st.error(f"**{error_type}:** {message}")
    if details:
        with st.expander("🔍 Error details"):
            st.code(details)


def show_toast(message: str, kind: str = "success") -> None:
    """Transient notice in the corner of the page."""
    st.toast(message, icon=TOAST_ICONS.get(kind, TOAST_ICONS["info"]))


def queue_toast(message: str, kind: str = "success") -> None:
    """Show a toast on the next run, for notices raised right before st.rerun()."""
    st.session_state.setdefault(TOAST_QUEUE_KEY, []).append((message, kind))


def flush_toasts() -> None:
    for message, kind in st.session_state.pop(TOAST_QUEUE_KEY, []):
        show_toast(message, kind)


def format_file_size(size_bytes: int) -> str:
    """Human readable size: ``512 B``, ``1.5 KB``, ``3.2 MB``."""
    if size_bytes < 1024:
        return f"{size_bytes} B"

    size = float(size_bytes)
    for unit in SIZE_UNITS[1:]:
        size /= 1024
        if size < 1024 or unit == SIZE_UNITS[-1]:
            break
    return f"{size:.1f} {unit}"
