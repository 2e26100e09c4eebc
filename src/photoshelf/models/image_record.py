"""
Image metadata model for photoshelf.

This module contains the ImageRecord dataclass that represents one row of
the ``image_metadata`` table.
"""

from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Any

from .month import Month


def parse_timestamp(value: str | datetime | None) -> datetime | None:
    """
    Parse a timestamp as returned by PostgREST.

    Args:
        value: ISO 8601 string (a trailing ``Z`` is accepted), datetime or None

    Returns:
        datetime or None if the value is empty or unparseable
    """
    if value is None or isinstance(value, datetime):
        return value

    try:
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        return datetime.fromisoformat(value)
    except (ValueError, TypeError):
        return None


@dataclass
class ImageRecord:
    """
    Metadata for one stored image.

    ``id`` and ``created_at`` are assigned by the metadata store on insert,
    so both are None for a record that has not been saved yet.
    ``storage_path`` is the join key with the object store.
    """

    id: Any
    filename: str
    original_name: str
    storage_path: str
    public_url: str
    size: int
    mime_type: str
    created_at: datetime | None = None

    @classmethod
    def create_new(
        cls,
        filename: str,
        original_name: str,
        storage_path: str,
        public_url: str,
        size: int,
        mime_type: str,
    ) -> "ImageRecord":
        """Create an unsaved record for insertion."""
        return cls(
            id=None,
            filename=filename,
            original_name=original_name,
            storage_path=storage_path,
            public_url=public_url,
            size=size,
            mime_type=mime_type,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ImageRecord":
        """
        Create ImageRecord from a metadata table row.

        Args:
            data: Row dictionary

        Returns:
            ImageRecord instance
        """
        return cls(
            id=data.get("id"),
            filename=data.get("filename") or "",
            original_name=data.get("original_name") or "",
            storage_path=data["storage_path"],
            public_url=data.get("public_url") or "",
            size=int(data.get("size") or 0),
            mime_type=data.get("mime_type") or "",
            created_at=parse_timestamp(data.get("created_at")),
        )

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to a JSON-safe dictionary.

        Returns:
            Dictionary representation of the row
        """
        return {
            "id": self.id,
            "filename": self.filename,
            "original_name": self.original_name,
            "storage_path": self.storage_path,
            "public_url": self.public_url,
            "size": self.size,
            "mime_type": self.mime_type,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def to_insert_row(self) -> dict[str, Any]:
        """Columns supplied by the client on insert."""
        return {
            "filename": self.filename,
            "original_name": self.original_name,
            "storage_path": self.storage_path,
            "public_url": self.public_url,
            "size": self.size,
            "mime_type": self.mime_type,
        }

    def month_in(self, tz: tzinfo) -> Month | None:
        """Local calendar month this record belongs to."""
        if self.created_at is None:
            return None
        return Month.of(self.created_at, tz)

    def get_display_name(self) -> str:
        """Name shown to users and in export failure lines."""
        return self.original_name or self.filename or self.storage_path
