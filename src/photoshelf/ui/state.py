"""
Gallery view state for one browser session.

The viewed month, the cached list of available months and the signed-in user
live in one ``GalleryViewState`` stored in ``st.session_state``. Month
navigation is implemented here as plain methods so it can be exercised without
Streamlit.

``available_months`` is kept newest first. "Previous" moves to an older month
and "next" to a newer one.
"""

from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from typing import Any

from ..models.image_record import ImageRecord
from ..models.month import Month
from ..services.auth import UserInfo

SESSION_KEY = "gallery_view_state"


@dataclass
class GalleryViewState:
    """View state owned by the gallery view controller."""

    current_month: Month
    available_months: list[Month] = field(default_factory=list)
    images: list[ImageRecord] = field(default_factory=list)
    user: UserInfo | None = None
    load_error: str | None = None
    needs_reload: bool = True

    @classmethod
    def starting_at(cls, now: datetime, tz: tzinfo) -> "GalleryViewState":
        """State viewing the local month of ``now``."""
        return cls(current_month=Month.of(now, tz))

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def sign_in(self, user: UserInfo) -> None:
        self.user = user
        self.needs_reload = True

    def sign_out(self) -> None:
        self.user = None
        self.images = []
        self.available_months = []
        self.load_error = None
        self.needs_reload = True

    def set_available_months(self, months: list[Month]) -> None:
        self.available_months = sorted(set(months), reverse=True)

    def _current_index(self) -> int:
        try:
            return self.available_months.index(self.current_month)
        except ValueError:
            return -1

    def older_month(self) -> Month | None:
        """Closest available month before the viewed one."""
        index = self._current_index()
        if index >= 0:
            return self.available_months[index + 1] if index + 1 < len(self.available_months) else None

        for month in self.available_months:
            if month < self.current_month:
                return month
        return None

    def newer_month(self) -> Month | None:
        """Closest available month after the viewed one."""
        index = self._current_index()
        if index >= 0:
            return self.available_months[index - 1] if index > 0 else None

        for month in reversed(self.available_months):
            if month > self.current_month:
                return month
        return None

    @property
    def can_go_previous(self) -> bool:
        return self.older_month() is not None

    @property
    def can_go_next(self) -> bool:
        return self.newer_month() is not None

    @property
    def show_pager(self) -> bool:
        return len(self.available_months) > 1

    def go_previous(self) -> bool:
        """Move to the older month. Returns False (and changes nothing) when disabled."""
        target = self.older_month()
        if target is None:
            return False
        self.current_month = target
        self.needs_reload = True
        return True

    def go_next(self) -> bool:
        """Move to the newer month. Returns False (and changes nothing) when disabled."""
        target = self.newer_month()
        if target is None:
            return False
        self.current_month = target
        self.needs_reload = True
        return True

    def change_month(self, direction: int) -> bool:
        """Move by direction: negative is older, positive is newer."""
        if direction < 0:
            return self.go_previous()
        if direction > 0:
            return self.go_next()
        return False


def get_view_state(session_state: Any, now: datetime, tz: tzinfo) -> GalleryViewState:
    """Get or create the view state held in a session state mapping."""
    if SESSION_KEY not in session_state:
        session_state[SESSION_KEY] = GalleryViewState.starting_at(now, tz)
    return session_state[SESSION_KEY]
