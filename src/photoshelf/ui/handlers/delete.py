"""Delete handler for photoshelf."""

from typing import Any

import structlog

from photoshelf.error_handling import PhotoShelfError
from photoshelf.models.image_record import ImageRecord
from photoshelf.services.metadata import MetadataService
from photoshelf.services.storage import StorageService

logger = structlog.get_logger(__name__)


def delete_image(
    record: ImageRecord,
    storage_service: StorageService,
    metadata_service: MetadataService,
) -> dict[str, Any]:
    """
    Delete one image: remove the object, then its metadata row.

    A failure in either step stops this delete. When the object removal
    succeeded but the row delete failed, the row is left pointing at a
    missing object.
    """
    try:
        storage_service.remove([record.storage_path])
        metadata_service.delete(record.id)
    except PhotoShelfError as e:
        logger.error("image_delete_failed", record_id=record.id, storage_path=record.storage_path, error=str(e))
        return {"success": False, "record_id": record.id, "error": str(e), "message": "Failed to delete image"}

    logger.info("image_deleted", record_id=record.id, storage_path=record.storage_path)
    return {"success": True, "record_id": record.id, "message": "Image deleted"}
