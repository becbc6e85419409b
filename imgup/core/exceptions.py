"""Exception hierarchy for imgup.

Provides typed exceptions for different failure modes with clear error messages.
"""

from __future__ import annotations

from typing import Any


class ImgUpError(Exception):
    """Base exception for all imgup errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(ImgUpError):
    """Error in configuration (missing, invalid, or malformed)."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = repr(value)
        super().__init__(message, details)
        self.field = field
        self.value = value


class ProfileNotFoundError(ConfigurationError):
    """Requested profile does not exist."""

    def __init__(self, profile: str):
        super().__init__(f"Profile not found: {profile}", field="profile", value=profile)
        self.profile = profile


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(ImgUpError):
    """Input validation failed."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = repr(value)
        super().__init__(message, details)
        self.field = field
        self.value = value


class InvalidURLError(ValidationError):
    """Invalid URL format."""

    def __init__(self, url: str, reason: str = ""):
        msg = f"Invalid URL: {url}"
        if reason:
            msg = f"{msg} - {reason}"
        super().__init__(msg, field="url", value=url)
        self.url = url
        self.reason = reason


class PathValidationError(ValidationError):
    """Path validation failed."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Invalid path: {path} - {reason}", field="path", value=path)
        self.path = path
        self.reason = reason


# =============================================================================
# Store Errors
# =============================================================================


class DuplicateIdentifier(ImgUpError):
    """An upload record with this identifier already exists."""

    def __init__(self, upload_id: str):
        super().__init__(
            f"Upload already exists: {upload_id}",
            {"upload_id": upload_id},
        )
        self.upload_id = upload_id


# =============================================================================
# Upload Errors
# =============================================================================


class UploadError(ImgUpError):
    """Error during a single upload attempt."""

    def __init__(
        self,
        message: str,
        upload_id: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        full_details = details or {}
        if upload_id:
            full_details["upload_id"] = upload_id
        super().__init__(message, full_details)
        self.upload_id = upload_id


class CompressionFailure(UploadError):
    """The compression adapter could not produce a derived image."""

    def __init__(self, file_name: str, reason: str = ""):
        msg = f"Failed to compress {file_name}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg, details={"file": file_name})
        self.file_name = file_name
        self.reason = reason


class TransportFailure(UploadError):
    """Network or remote storage error while sending a file."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
    ):
        details: dict[str, Any] = {}
        if url:
            details["url"] = url
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, details=details)
        self.url = url
        self.status_code = status_code


class TransportCanceled(UploadError):
    """Cancellation was observed during compression or transport."""

    def __init__(self, upload_id: str | None = None):
        super().__init__("Upload canceled", upload_id=upload_id)
