"""Upload handlers for photoshelf."""

import random
from collections.abc import Callable
from datetime import datetime, tzinfo
from typing import Any

import structlog

from photoshelf.error_handling import PhotoShelfError, UploadError
from photoshelf.models.image_record import ImageRecord
from photoshelf.services.metadata import MetadataService
from photoshelf.services.storage import StorageService, build_storage_path, generate_filename, get_content_type
from photoshelf.ui.interaction import is_image_file

logger = structlog.get_logger()


def collect_file_info(uploaded_file: Any) -> dict[str, Any]:
    """
    Read a Streamlit UploadedFile into the dictionary the pipeline works on.

    Args:
        uploaded_file: Uploaded file object from Streamlit

    Returns:
        dict: filename, data, size and content_type

    Raises:
        UploadError: If the file contents cannot be read
    """
    try:
        file_data = uploaded_file.getvalue()
    except Exception as e:
        raise UploadError(
            f"Failed to read '{uploaded_file.name}': {e}",
            details={"filename": uploaded_file.name},
            original_exception=e,
        ) from e

    return {
        "filename": uploaded_file.name,
        "data": file_data,
        "size": len(file_data),
        "content_type": getattr(uploaded_file, "type", None) or get_content_type(uploaded_file.name),
    }


def process_single_upload(
    file_info: dict[str, Any],
    storage_service: StorageService,
    metadata_service: MetadataService,
    now: datetime,
    rng: random.Random | None = None,
) -> dict[str, Any]:
    """
    Upload one file: write the object, resolve its URL, then insert its record.

    The two writes are not atomic. If the insert fails the object stays in
    the bucket without a metadata row.

    Args:
        file_info: Dictionary from collect_file_info
        storage_service: Object store
        metadata_service: Metadata table
        now: Local time of the upload; picks the year/month folder
        rng: Random source for the name suffix

    Returns:
        dict: Processing result with success status and details
    """
    original_name = file_info["filename"]
    file_data = file_info["data"]
    content_type = file_info.get("content_type") or get_content_type(original_name)

    try:
        logger.info("upload_processing_started", filename=original_name, size=len(file_data))

        filename = generate_filename(original_name, now, rng)
        storage_path = build_storage_path(filename, now)

        storage_service.upload(storage_path, file_data, content_type=content_type)
        public_url = storage_service.get_public_url(storage_path)

        record = ImageRecord.create_new(
            filename=filename,
            original_name=original_name,
            storage_path=storage_path,
            public_url=public_url,
            size=len(file_data),
            mime_type=content_type,
        )
        saved = metadata_service.insert(record)

    except PhotoShelfError as e:
        logger.error("upload_processing_failed", filename=original_name, error=str(e))
        return {
            "success": False,
            "filename": original_name,
            "error": str(e),
            "message": f"Failed to upload {original_name}",
        }

    logger.info("upload_processing_completed", filename=original_name, storage_path=storage_path)
    return {
        "success": True,
        "filename": original_name,
        "storage_path": storage_path,
        "record": saved,
        "message": f"{original_name} uploaded successfully!",
    }


def process_batch_upload(
    uploaded_files: list[Any],
    storage_service: StorageService,
    metadata_service: MetadataService,
    tz: tzinfo,
    clock: Callable[[tzinfo], datetime] = datetime.now,
    rng: random.Random | None = None,
) -> dict[str, Any]:
    """
    Upload files one at a time. A failing file is reported and the rest continue.

    Files without an ``image/*`` content type are skipped.

    Returns:
        dict: Batch results with success/failure counts and per-file details
    """
    results = []
    successful_uploads = 0
    failed_uploads = 0
    skipped_uploads = 0
    total_files = len(uploaded_files)

    logger.info("batch_upload_started", total_files=total_files)

    for uploaded_file in uploaded_files:
        name = getattr(uploaded_file, "name", "unknown")

        if not is_image_file(uploaded_file):
            skipped_uploads += 1
            results.append(
                {"success": False, "skipped": True, "filename": name, "message": f"Skipped {name}: not an image"}
            )
            logger.warning("upload_skipped_not_image", filename=name, content_type=getattr(uploaded_file, "type", None))
            continue

        try:
            file_info = collect_file_info(uploaded_file)
        except UploadError as e:
            failed_uploads += 1
            results.append({"success": False, "filename": name, "error": str(e), "message": f"Failed to upload {name}"})
            logger.error("upload_read_failed", filename=name, error=str(e))
            continue

        result = process_single_upload(file_info, storage_service, metadata_service, clock(tz), rng)
        results.append(result)

        if result["success"]:
            successful_uploads += 1
        else:
            failed_uploads += 1

    logger.info(
        "batch_upload_completed",
        total_files=total_files,
        successful=successful_uploads,
        failed=failed_uploads,
        skipped=skipped_uploads,
    )

    return {
        "success": failed_uploads == 0,
        "total_files": total_files,
        "successful_uploads": successful_uploads,
        "failed_uploads": failed_uploads,
        "skipped_uploads": skipped_uploads,
        "results": results,
        "message": f"Processed {total_files} files: {successful_uploads} successful, "
        f"{skipped_uploads} skipped, {failed_uploads} failed",
    }
