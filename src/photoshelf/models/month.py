"""
Calendar month value used for gallery bucketing and navigation.

Months are derived from an image's ``created_at`` in the display timezone,
never stored.
"""

import calendar
from dataclasses import dataclass
from datetime import UTC, datetime, tzinfo
from typing import NamedTuple


class MonthBounds(NamedTuple):
    """Half-open interval ``[start, end)`` covering one local calendar month."""

    start: datetime
    end: datetime

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end


@dataclass(frozen=True, order=True)
class Month:
    """A calendar month, e.g. ``Month(2025, 3)`` for March 2025."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"Invalid month: {self.month}")

    @classmethod
    def of(cls, instant: datetime, tz: tzinfo) -> "Month":
        """
        Bucket an instant into its local calendar month.

        Naive datetimes are taken as UTC, like stored ``created_at`` values.
        """
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=UTC)
        instant = instant.astimezone(tz)
        return cls(instant.year, instant.month)

    @classmethod
    def parse(cls, value: str) -> "Month":
        """Parse a ``YYYY-MM`` key."""
        try:
            year, month = value.split("-")
            return cls(int(year), int(month))
        except ValueError as e:
            raise ValueError(f"Invalid month key '{value}', expected YYYY-MM") from e

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    def next(self) -> "Month":
        if self.month == 12:
            return Month(self.year + 1, 1)
        return Month(self.year, self.month + 1)

    def previous(self) -> "Month":
        if self.month == 1:
            return Month(self.year - 1, 12)
        return Month(self.year, self.month - 1)

    def bounds(self, tz: tzinfo) -> MonthBounds:
        """Local-time bounds of this month as timezone aware datetimes."""
        following = self.next()
        return MonthBounds(
            start=datetime(self.year, self.month, 1, tzinfo=tz),
            end=datetime(following.year, following.month, 1, tzinfo=tz),
        )

    def label(self) -> str:
        """Heading text, e.g. ``March 2025``."""
        return f"{calendar.month_name[self.month]} {self.year}"
