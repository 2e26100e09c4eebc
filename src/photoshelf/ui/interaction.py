"""
Drag and click handling as an explicit state machine.

States:
    IDLE           nothing in progress
    DRAG_ACTIVE    files are being dragged over the page
    CLICK_PENDING  a card was clicked once; waiting to see if a second click follows

Every event carries its own timestamp (seconds), so transitions are
deterministic and no timers race each other. A pending click turns into a
``CopyUrl`` action once ``DOUBLE_CLICK_WINDOW`` has passed (on ``poll`` or on
the next event); a second click on the same card inside the window turns into
``ShowFullImage`` instead.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

DOUBLE_CLICK_WINDOW = 0.25


class InteractionState(Enum):
    IDLE = "idle"
    DRAG_ACTIVE = "drag_active"
    CLICK_PENDING = "click_pending"


@dataclass(frozen=True)
class CopyUrl:
    url: str


@dataclass(frozen=True)
class ShowFullImage:
    url: str


@dataclass(frozen=True)
class UploadFiles:
    """Everything that was dropped, in drop order. Non-images are reported, not uploaded."""

    files: tuple[Any, ...]

    @property
    def images(self) -> tuple[Any, ...]:
        return tuple(file for file in self.files if is_image_file(file))

    @property
    def skipped(self) -> tuple[Any, ...]:
        return tuple(file for file in self.files if not is_image_file(file))


Action = CopyUrl | ShowFullImage | UploadFiles


def is_image_file(file: Any) -> bool:
    """Whether an uploaded file declares an image content type."""
    content_type = getattr(file, "type", None) or ""
    return content_type.startswith("image/")


class InteractionMachine:
    """State machine for page drag/drop and card click/double-click."""

    def __init__(self, authenticated: bool = True, window: float = DOUBLE_CLICK_WINDOW) -> None:
        self.authenticated = authenticated
        self.window = window
        self.state = InteractionState.IDLE
        self.drag_depth = 0
        self._pending_url: str | None = None
        self._pending_since = 0.0

    def _flush_pending(self, now: float, force: bool = False) -> list[Action]:
        if self.state is not InteractionState.CLICK_PENDING:
            return []
        if not force and now - self._pending_since < self.window:
            return []

        url, self._pending_url = self._pending_url, None
        self.state = InteractionState.IDLE
        return [CopyUrl(url)] if url is not None else []

    def drag_enter(self, now: float) -> list[Action]:
        """Files entered the page (or a nested element)."""
        if not self.authenticated:
            return []
        actions = self._flush_pending(now, force=True)
        self.drag_depth += 1
        self.state = InteractionState.DRAG_ACTIVE
        return actions

    def drag_leave(self, now: float) -> list[Action]:
        """Files left the page (or a nested element)."""
        if self.state is not InteractionState.DRAG_ACTIVE:
            return []
        self.drag_depth = max(0, self.drag_depth - 1)
        if self.drag_depth == 0:
            self.state = InteractionState.IDLE
        return []

    def drop(self, files: list[Any], now: float) -> list[Action]:
        """Files were dropped. All of them go to the upload batch, which skips non-images."""
        actions = self._flush_pending(now, force=True)
        self.drag_depth = 0
        self.state = InteractionState.IDLE

        if not self.authenticated:
            return actions

        if files:
            actions.append(UploadFiles(tuple(files)))
        return actions

    def click(self, url: str, now: float) -> list[Action]:
        """A card was clicked once."""
        if self.state is InteractionState.DRAG_ACTIVE:
            return []

        if self.state is InteractionState.CLICK_PENDING:
            if self._pending_url == url and now - self._pending_since < self.window:
                return self.double_click(url, now)
            actions = self._flush_pending(now, force=True)
        else:
            actions = []

        self.state = InteractionState.CLICK_PENDING
        self._pending_url = url
        self._pending_since = now
        return actions

    def double_click(self, url: str, now: float) -> list[Action]:
        """A card was double-clicked. Any pending single click on it is discarded."""
        if self.state is InteractionState.DRAG_ACTIVE:
            return []

        actions: list[Action] = []
        if self.state is InteractionState.CLICK_PENDING and self._pending_url != url:
            actions = self._flush_pending(now, force=True)

        self._pending_url = None
        self.state = InteractionState.IDLE
        actions.append(ShowFullImage(url))
        return actions

    def poll(self, now: float) -> list[Action]:
        """Resolve a pending click whose double-click window has passed."""
        return self._flush_pending(now)
