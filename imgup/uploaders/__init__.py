"""Compression and transport collaborators for imgup.

This module provides the two leaves the upload orchestrator drives:
- Compression adapter (Pillow-based resize and re-encode)
- HTTP transport (httpx multipart POST with streamed progress)

These are internal implementation details. Use `UploadService` from
`imgup.services.uploads` as the public API.
"""

from imgup.uploaders.common import collect_image_files, expand_sources, is_image_file
from imgup.uploaders.compression import CompressionSettings, compress_image
from imgup.uploaders.constants import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_FIELD_NAME,
    DEFAULT_IMAGE_FORMAT,
    DEFAULT_MAX_HEIGHT,
    DEFAULT_MAX_WIDTH,
    DEFAULT_QUALITY,
    DEFAULT_SERVER_URL,
    DEFAULT_TIMEOUT,
    DEFAULT_UPLOAD_PATH,
    DEFAULT_UPLOAD_WORKERS,
)
from imgup.uploaders.transport import HttpTransport, Transport, TransportResult

__all__ = [
    # Constants
    "DEFAULT_CHUNK_SIZE",
    "DEFAULT_FIELD_NAME",
    "DEFAULT_IMAGE_FORMAT",
    "DEFAULT_MAX_HEIGHT",
    "DEFAULT_MAX_WIDTH",
    "DEFAULT_QUALITY",
    "DEFAULT_SERVER_URL",
    "DEFAULT_TIMEOUT",
    "DEFAULT_UPLOAD_PATH",
    "DEFAULT_UPLOAD_WORKERS",
    # Common utilities
    "collect_image_files",
    "expand_sources",
    "is_image_file",
    # Compression
    "CompressionSettings",
    "compress_image",
    # Transport
    "HttpTransport",
    "Transport",
    "TransportResult",
]
