"""Gallery components for photoshelf."""

from datetime import tzinfo

import streamlit as st
import structlog

from ..handlers.gallery import format_local_timestamp
from ..state import GalleryViewState
from .common import format_file_size

logger = structlog.get_logger(__name__)

COLS_PER_ROW = 4


def render_month_heading(view_state: GalleryViewState) -> None:
    """Heading with the viewed month, e.g. "March 2025"."""
    st.markdown(f"### {view_state.current_month.label()}")


def render_month_pager(view_state: GalleryViewState) -> int:
    """
    Render previous/next month buttons.

    Shown only when more than one month holds images. "Previous" goes to an
    older month and "Next" to a newer one.

    Returns:
        int: -1 if previous was pressed, 1 if next was pressed, else 0
    """
    if not view_state.show_pager:
        return 0

    col1, col2, col3 = st.columns([1, 2, 1])
    direction = 0

    with col1:
        if st.button("← Previous", disabled=not view_state.can_go_previous, use_container_width=True):
            direction = -1

    with col2:
        st.markdown(
            f"<div style='text-align: center; padding-top: 0.4rem;'>{view_state.current_month.label()}</div>",
            unsafe_allow_html=True,
        )

    with col3:
        if st.button("Next →", disabled=not view_state.can_go_next, use_container_width=True):
            direction = 1

    return direction


def render_image_grid(view_state: GalleryViewState, tz: tzinfo) -> tuple[str | None, object | None]:
    """
    Render the viewed month's images in a grid.

    Delete buttons are only rendered for a signed-in user.

    Returns:
        tuple: (URL of a card whose open button was pressed, record whose delete button was pressed)
    """
    clicked_url = None
    delete_record = None
    images = view_state.images

    for i in range(0, len(images), COLS_PER_ROW):
        cols = st.columns(COLS_PER_ROW)

        for j, col in enumerate(cols):
            index = i + j
            if index >= len(images):
                with col:
                    st.empty()
                continue

            record = images[index]
            with col:
                st.image(record.public_url, caption=record.original_name, use_container_width=True)
                st.caption(f"📅 {format_local_timestamp(record.created_at, tz)} · {format_file_size(record.size)}")

                open_col, delete_col = st.columns([3, 1])
                with open_col:
                    if st.button("🔍 Open", key=f"open_{record.id}", use_container_width=True,
                                 help="Click to copy the URL, double-click to view full size"):
                        clicked_url = record.public_url
                if view_state.is_authenticated:
                    with delete_col:
                        if st.button("×", key=f"delete_{record.id}", help="Delete image"):
                            delete_record = record

    return clicked_url, delete_record


@st.dialog("Preview", width="large")
def show_full_image(url: str) -> None:
    """Full-size preview of one image."""
    st.image(url, use_container_width=True)


def render_copied_url(url: str) -> None:
    """Show an image URL with Streamlit's copy button."""
    st.caption("Image URL (use the copy button)")
    st.code(url, language=None)
