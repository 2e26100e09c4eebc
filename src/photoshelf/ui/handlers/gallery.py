"""Gallery handlers for photoshelf."""

from datetime import UTC, datetime, tzinfo

import structlog

from photoshelf.error_handling import MetadataError
from photoshelf.models.image_record import parse_timestamp
from photoshelf.services.metadata import MetadataService
from photoshelf.ui.state import GalleryViewState

logger = structlog.get_logger(__name__)


def load_gallery(view_state: GalleryViewState, metadata_service: MetadataService, tz: tzinfo) -> bool:
    """
    Load the available months and the viewed month's images into the view state.

    A metadata failure is fatal for this load: the previous images are
    cleared and ``load_error`` carries the message to show.

    Returns:
        bool: True if both fetches succeeded
    """
    try:
        months = metadata_service.get_available_months(tz)
        images = metadata_service.list_month(view_state.current_month, tz)
    except MetadataError as e:
        logger.error("gallery_load_failed", month=str(view_state.current_month), error=str(e))
        view_state.images = []
        view_state.load_error = e.user_message
        view_state.needs_reload = False
        return False

    view_state.set_available_months(months)
    view_state.images = images
    view_state.load_error = None
    view_state.needs_reload = False

    logger.info(
        "gallery_loaded",
        month=str(view_state.current_month),
        count=len(images),
        available_months=len(months),
    )
    return True


def format_local_timestamp(value: datetime | str | None, tz: tzinfo) -> str:
    """
    Format an image timestamp in the display timezone.

    Args:
        value: datetime or ISO string (naive values are taken as UTC)
        tz: Display timezone

    Returns:
        str: ``YYYY-MM-DD HH:MM`` or an empty string
    """
    parsed = parse_timestamp(value) if isinstance(value, str) else value
    if parsed is None:
        return ""

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)

    return parsed.astimezone(tz).strftime("%Y-%m-%d %H:%M")
