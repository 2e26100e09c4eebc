"""
Metadata service for the image metadata table.

Every list operation orders by ``created_at`` descending. Month bucketing is
computed client-side from ``created_at`` in the display timezone.
"""

from datetime import UTC, datetime, tzinfo
from typing import Any

from ..error_handling import MetadataError
from ..logging_config import get_logger
from ..models.image_record import ImageRecord, parse_timestamp
from ..models.month import Month, MonthBounds

logger = get_logger(__name__)


def _to_utc_iso(instant: datetime) -> str:
    return instant.astimezone(UTC).isoformat()


class MetadataService:
    """Service for the ``image_metadata`` table."""

    def __init__(self, client: Any, table_name: str = "image_metadata") -> None:
        """
        Initialize the metadata service.

        Args:
            client: Supabase client
            table_name: Table holding one row per image
        """
        self.client = client
        self.table_name = table_name

    def _table(self) -> Any:
        return self.client.table(self.table_name)

    def list_all(self) -> list[ImageRecord]:
        """
        Get every record, newest first.

        Raises:
            MetadataError: If the fetch fails
        """
        try:
            response = self._table().select("*").order("created_at", desc=True).execute()
        except Exception as e:
            raise MetadataError(
                f"Failed to fetch image metadata: {e}",
                details={"operation": "list_all"},
                original_exception=e,
            ) from e

        records = [ImageRecord.from_dict(row) for row in response.data or []]
        logger.info("metadata_fetched", count=len(records))
        return records

    def list_between(self, bounds: MonthBounds) -> list[ImageRecord]:
        """
        Get records with ``bounds.start <= created_at < bounds.end``, newest first.

        Raises:
            MetadataError: If the fetch fails
        """
        try:
            response = (
                self._table()
                .select("*")
                .gte("created_at", _to_utc_iso(bounds.start))
                .lt("created_at", _to_utc_iso(bounds.end))
                .order("created_at", desc=True)
                .execute()
            )
        except Exception as e:
            raise MetadataError(
                f"Failed to fetch images for {bounds.start.date()}: {e}",
                details={"operation": "list_between", "start": bounds.start.isoformat()},
                original_exception=e,
            ) from e

        records = [ImageRecord.from_dict(row) for row in response.data or []]
        logger.debug("month_metadata_fetched", start=bounds.start.isoformat(), count=len(records))
        return records

    def list_month(self, month: Month, tz: tzinfo) -> list[ImageRecord]:
        """Get the records of one local calendar month, newest first."""
        return self.list_between(month.bounds(tz))

    def get_available_months(self, tz: tzinfo) -> list[Month]:
        """
        Distinct months holding at least one image, newest first.

        Raises:
            MetadataError: If the fetch fails
        """
        try:
            response = self._table().select("created_at").order("created_at", desc=True).execute()
        except Exception as e:
            raise MetadataError(
                f"Failed to fetch available months: {e}",
                details={"operation": "get_available_months"},
                original_exception=e,
            ) from e

        months = set()
        for row in response.data or []:
            created_at = parse_timestamp(row.get("created_at"))
            if created_at is not None:
                months.add(Month.of(created_at, tz))

        return sorted(months, reverse=True)

    def insert(self, record: ImageRecord) -> ImageRecord:
        """
        Insert a record.

        Returns:
            ImageRecord: The stored row when the store returns it, else the input

        Raises:
            MetadataError: If the insert fails
        """
        try:
            response = self._table().insert(record.to_insert_row()).execute()
        except Exception as e:
            raise MetadataError(
                f"Failed to save metadata for '{record.storage_path}': {e}",
                user_message="Failed to save image details.",
                details={"storage_path": record.storage_path},
                original_exception=e,
            ) from e

        logger.info("metadata_inserted", storage_path=record.storage_path)
        if response.data:
            return ImageRecord.from_dict(response.data[0])
        return record

    def delete(self, record_id: Any) -> None:
        """
        Delete a record by id.

        Raises:
            MetadataError: If the delete fails
        """
        try:
            self._table().delete().eq("id", record_id).execute()
        except Exception as e:
            raise MetadataError(
                f"Failed to delete metadata {record_id}: {e}",
                user_message="Failed to delete image.",
                details={"record_id": record_id},
                original_exception=e,
            ) from e

        logger.info("metadata_deleted", record_id=record_id)
