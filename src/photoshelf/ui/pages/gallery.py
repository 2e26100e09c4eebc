"""Gallery page for photoshelf."""

import time
from typing import Any

import streamlit as st
import structlog

from ..components.common import flush_toasts, queue_toast, render_empty_state, render_error_message, show_toast
from ..components.gallery import (
    render_copied_url,
    render_image_grid,
    render_month_heading,
    render_month_pager,
    show_full_image,
)
from ..handlers.delete import delete_image
from ..handlers.gallery import load_gallery
from ..handlers.session import SessionServices
from ..handlers.upload import process_batch_upload
from ..interaction import CopyUrl, InteractionMachine, ShowFullImage, UploadFiles
from ..state import GalleryViewState

logger = structlog.get_logger(__name__)

MACHINE_KEY = "interaction_machine"
UPLOADER_COUNTER_KEY = "uploader_counter"
COPIED_URL_KEY = "copied_url"

# Each button press is a server round trip, so two presses need more than the
# browser's double-click interval.
BUTTON_DOUBLE_CLICK_WINDOW = 0.6


def get_interaction_machine(view_state: GalleryViewState) -> InteractionMachine:
    if MACHINE_KEY not in st.session_state:
        st.session_state[MACHINE_KEY] = InteractionMachine(window=BUTTON_DOUBLE_CLICK_WINDOW)
    machine: InteractionMachine = st.session_state[MACHINE_KEY]
    machine.authenticated = view_state.is_authenticated
    return machine


def apply_actions(actions: list[Any], view_state: GalleryViewState, services: SessionServices) -> None:
    """Carry out what the interaction machine decided."""
    for action in actions:
        if isinstance(action, CopyUrl):
            st.session_state[COPIED_URL_KEY] = action.url
            show_toast("URL ready to copy!")
        elif isinstance(action, ShowFullImage):
            show_full_image(action.url)
        elif isinstance(action, UploadFiles):
            upload_files(list(action.files), view_state, services)


def upload_files(files: list[Any], view_state: GalleryViewState, services: SessionServices) -> None:
    """Upload sequentially, toast per file, then reload the gallery."""
    with st.spinner("Uploading..."):
        batch_result = process_batch_upload(files, services.storage, services.metadata, services.tz)

    for result in batch_result["results"]:
        if result.get("skipped"):
            show_toast(result["message"], "warning")
        else:
            show_toast(result["message"], "success" if result["success"] else "error")

    # New widget key empties the uploader
    st.session_state[UPLOADER_COUNTER_KEY] = st.session_state.get(UPLOADER_COUNTER_KEY, 0) + 1
    view_state.needs_reload = True


def render_upload_banner(view_state: GalleryViewState, machine: InteractionMachine, services: SessionServices) -> None:
    """Upload area, only for a signed-in user."""
    if not view_state.is_authenticated:
        return

    counter = st.session_state.get(UPLOADER_COUNTER_KEY, 0)
    uploaded_files = st.file_uploader(
        "📤 Drop images here or click to upload",
        accept_multiple_files=True,
        key=f"uploader_{counter}",
    )

    if uploaded_files:
        apply_actions(machine.drop(list(uploaded_files), time.monotonic()), view_state, services)


@st.fragment(run_every="1s")
def render_click_feedback() -> None:
    """Resolve a pending single click once its double-click window has passed."""
    machine: InteractionMachine | None = st.session_state.get(MACHINE_KEY)
    if machine is not None:
        for action in machine.poll(time.monotonic()):
            if isinstance(action, CopyUrl):
                st.session_state[COPIED_URL_KEY] = action.url

    copied_url = st.session_state.get(COPIED_URL_KEY)
    if copied_url:
        render_copied_url(copied_url)


def render_gallery_page(view_state: GalleryViewState, services: SessionServices) -> None:
    """Render upload area, month heading, image grid and month pager."""
    flush_toasts()
    machine = get_interaction_machine(view_state)
    apply_actions(machine.poll(time.monotonic()), view_state, services)

    render_upload_banner(view_state, machine, services)

    if view_state.needs_reload:
        with st.spinner("Loading..."):
            load_gallery(view_state, services.metadata, services.tz)

    render_month_heading(view_state)

    if view_state.load_error:
        render_error_message("Gallery Error", view_state.load_error)
        return

    if not view_state.images:
        render_empty_state("No images yet", "No images yet. Upload your first image!")
    else:
        render_click_feedback()
        clicked_url, delete_record = render_image_grid(view_state, services.tz)

        if clicked_url is not None:
            apply_actions(machine.click(clicked_url, time.monotonic()), view_state, services)

        if delete_record is not None:
            result = delete_image(delete_record, services.storage, services.metadata)
            if result["success"]:
                queue_toast(result["message"])
                view_state.needs_reload = True
                st.rerun()
            show_toast(result["message"], "error")

    direction = render_month_pager(view_state)
    if direction and view_state.change_month(direction):
        logger.info("month_changed", month=str(view_state.current_month))
        st.rerun()
