"""imgup - Batch image compression and upload.

This package compresses a batch of images and uploads them concurrently to
a storage endpoint:
- One independent, cancelable task per image (compress -> transfer)
- Per-item status and progress, with retry of failed or canceled items
- A single aggregate completion percentage across the whole batch
"""

__version__ = "0.1.0"

from imgup.core.config import Config, Profile
from imgup.core.exceptions import (
    CompressionFailure,
    ConfigurationError,
    DuplicateIdentifier,
    ImgUpError,
    TransportCanceled,
    TransportFailure,
    UploadError,
    ValidationError,
)
from imgup.models.upload import ImageFile, UploadRecord, UploadStatus
from imgup.services.store import UploadStore
from imgup.services.uploads import UploadService
from imgup.uploaders.transport import HttpTransport

__all__ = [
    "__version__",
    "Config",
    "Profile",
    "HttpTransport",
    "ImageFile",
    "UploadRecord",
    "UploadService",
    "UploadStatus",
    "UploadStore",
    "ImgUpError",
    "CompressionFailure",
    "ConfigurationError",
    "DuplicateIdentifier",
    "TransportCanceled",
    "TransportFailure",
    "UploadError",
    "ValidationError",
]
