"""
Error classification for photoshelf.

Failures are distinguished by the phase that produced them (authentication,
storage, metadata, upload, ...). Service wrappers convert client library
exceptions into these classes so callers only need to know about one
hierarchy. Each subclass fixes its category, the message shown to users when
none is given, and whether the operation can be retried.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from .logging_config import log_error, log_security_event


class ErrorCategory(Enum):
    """Phase that produced an error."""

    AUTHENTICATION = "authentication"
    CONFIGURATION = "configuration"
    STORAGE = "storage"
    METADATA = "metadata"
    UPLOAD = "upload"
    VALIDATION = "validation"
    UNKNOWN = "unknown"


@dataclass
class ErrorInfo:
    """Snapshot of an error for display or serialization."""

    category: ErrorCategory
    message: str
    user_message: str
    details: dict[str, Any]
    timestamp: datetime
    recoverable: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category.value,
            "message": self.message,
            "user_message": self.user_message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "recoverable": self.recoverable,
        }


class PhotoShelfError(Exception):
    """Base exception class for photoshelf."""

    category = ErrorCategory.UNKNOWN
    default_user_message = "Something went wrong."
    recoverable = True

    def __init__(
        self,
        message: str,
        user_message: str | None = None,
        details: dict[str, Any] | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(message)
        self.user_message = user_message or self.default_user_message
        self.details = details or {}
        self.original_exception = original_exception
        self.timestamp = datetime.now()

        self._log_error()

    def _log_error(self) -> None:
        context: dict[str, Any] = {"category": self.category.value, "recoverable": self.recoverable}
        context.update(self.details)
        if self.original_exception is not None:
            context["original_exception"] = repr(self.original_exception)

        log_error(self, context)

        if self.category is ErrorCategory.AUTHENTICATION:
            log_security_event(self.category.value, **context)

    def get_error_info(self) -> ErrorInfo:
        return ErrorInfo(
            category=self.category,
            message=str(self),
            user_message=self.user_message,
            details=self.details,
            timestamp=self.timestamp,
            recoverable=self.recoverable,
        )


class AuthenticationError(PhotoShelfError):
    """Sign-in, sign-out or session lookup failed."""

    category = ErrorCategory.AUTHENTICATION
    default_user_message = "Authentication failed. Please sign in again."


class ConfigurationError(PhotoShelfError):
    """Required configuration is missing or invalid."""

    category = ErrorCategory.CONFIGURATION
    default_user_message = "The application is not configured correctly."
    recoverable = False


class StorageError(PhotoShelfError):
    """An object store call failed."""

    category = ErrorCategory.STORAGE
    default_user_message = "Storage error. Please try again later."


class MetadataError(PhotoShelfError):
    """A metadata table call failed."""

    category = ErrorCategory.METADATA
    default_user_message = "Failed to load images."


class UploadError(PhotoShelfError):
    """A selected file could not be read for upload."""

    category = ErrorCategory.UPLOAD
    default_user_message = "Upload failed."


class ValidationError(PhotoShelfError):
    """Input that cannot be accepted, e.g. a storage path escaping the export root."""

    category = ErrorCategory.VALIDATION
    default_user_message = "Invalid input."
