"""Storage service for Supabase Storage operations."""

import random
import string
from datetime import datetime
from pathlib import PurePosixPath
from typing import Any

from ..error_handling import StorageError
from ..logging_config import get_logger

logger = get_logger(__name__)

STORAGE_ROOT = "images"
DEFAULT_CACHE_CONTROL = "3600"
RANDOM_SUFFIX_LENGTH = 6
_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits


def get_content_type(filename: str) -> str:
    """
    Determine content type from filename.

    Args:
        filename: File name

    Returns:
        str: MIME content type
    """
    extension = PurePosixPath(filename).suffix.lower()
    content_types = {
        ".jpg": "image/jpeg",
        ".jpeg": "image/jpeg",
        ".heic": "image/heic",
        ".heif": "image/heif",
        ".png": "image/png",
        ".gif": "image/gif",
        ".webp": "image/webp",
        ".bmp": "image/bmp",
        ".svg": "image/svg+xml",
        ".tiff": "image/tiff",
        ".tif": "image/tiff",
    }
    return content_types.get(extension, "application/octet-stream")


def generate_filename(original_name: str, now: datetime, rng: random.Random | None = None) -> str:
    """
    Generate a unique object name: ``<epoch_millis>_<rand>.<ext>``.

    The original extension keeps its case (``photo.PNG`` -> ``..._abc123.PNG``).
    A name without an extension produces no suffix.
    """
    rng = rng or random.Random()
    millis = int(now.timestamp() * 1000)
    suffix = "".join(rng.choices(_SUFFIX_ALPHABET, k=RANDOM_SUFFIX_LENGTH))
    extension = PurePosixPath(original_name).suffix
    return f"{millis}_{suffix}{extension}"


def build_storage_path(filename: str, now: datetime) -> str:
    """Storage path under the year/month of ``now``: ``images/<YYYY>/<MM>/<filename>``."""
    return f"{STORAGE_ROOT}/{now.year:04d}/{now.month:02d}/{filename}"


class StorageService:
    """Service for one Supabase Storage bucket."""

    def __init__(self, client: Any, bucket_name: str = "images") -> None:
        """
        Initialize the storage service.

        Args:
            client: Supabase client
            bucket_name: Storage bucket holding the images
        """
        self.client = client
        self.bucket_name = bucket_name

    @property
    def bucket(self) -> Any:
        return self.client.storage.from_(self.bucket_name)

    def download(self, storage_path: str) -> bytes:
        """
        Download an object.

        Args:
            storage_path: Object path inside the bucket

        Returns:
            bytes: Object data

        Raises:
            StorageError: If download fails
        """
        try:
            file_data: bytes = self.bucket.download(storage_path)
        except Exception as e:
            raise StorageError(
                f"Failed to download '{storage_path}': {e}",
                details={"storage_path": storage_path},
                original_exception=e,
            ) from e

        logger.debug("file_downloaded", storage_path=storage_path, size=len(file_data))
        return file_data

    def upload(
        self,
        storage_path: str,
        file_data: bytes,
        content_type: str | None = None,
        cache_control: str = DEFAULT_CACHE_CONTROL,
        upsert: bool = False,
    ) -> dict:
        """
        Upload an object.

        Args:
            storage_path: Object path inside the bucket
            file_data: Raw image data
            content_type: MIME type (derived from the path when omitted)
            cache_control: Cache-Control max-age in seconds
            upsert: Overwrite an existing object instead of failing

        Returns:
            dict: Upload result

        Raises:
            StorageError: If upload fails
        """
        content_type = content_type or get_content_type(storage_path)
        file_options = {
            "cache-control": cache_control,
            "content-type": content_type,
            "upsert": "true" if upsert else "false",
        }

        try:
            self.bucket.upload(path=storage_path, file=file_data, file_options=file_options)
        except Exception as e:
            raise StorageError(
                f"Failed to upload '{storage_path}': {e}",
                user_message="Upload failed.",
                details={"storage_path": storage_path},
                original_exception=e,
            ) from e

        logger.info("file_uploaded", storage_path=storage_path, size=len(file_data), content_type=content_type)
        return {"storage_path": storage_path, "file_size": len(file_data), "content_type": content_type}

    def get_public_url(self, storage_path: str) -> str:
        """
        Public URL of an object.

        Raises:
            StorageError: If the URL cannot be resolved
        """
        try:
            url: str = self.bucket.get_public_url(storage_path)
        except Exception as e:
            raise StorageError(
                f"Failed to resolve public URL for '{storage_path}': {e}",
                details={"storage_path": storage_path},
                original_exception=e,
            ) from e

        # Some client versions append an empty query string
        return url.rstrip("?")

    def remove(self, storage_paths: list[str]) -> None:
        """
        Remove objects.

        Args:
            storage_paths: Object paths inside the bucket

        Raises:
            StorageError: If removal fails
        """
        try:
            self.bucket.remove(storage_paths)
        except Exception as e:
            raise StorageError(
                f"Failed to remove {storage_paths}: {e}",
                user_message="Failed to delete image.",
                details={"storage_paths": storage_paths},
                original_exception=e,
            ) from e

        logger.info("files_removed", storage_paths=storage_paths)
