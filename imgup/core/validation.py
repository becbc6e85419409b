"""Input validation helpers for imgup.

Each validator returns the normalized value or raises a ValidationError
subclass naming the offending field.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from imgup.core.exceptions import InvalidURLError, PathValidationError, ValidationError

# Source images the compressor accepts
IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png"}

MAX_WORKERS = 64


def validate_server_url(url: str) -> str:
    """Validate and normalize a storage server URL.

    Args:
        url: URL to validate.

    Returns:
        URL without trailing slash.

    Raises:
        InvalidURLError: If the URL has no http(s) scheme or no host.
    """
    if not url or not url.strip():
        raise InvalidURLError(url or "", "URL is empty")

    url = url.strip()
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise InvalidURLError(url, "scheme must be http or https")
    if not parsed.netloc:
        raise InvalidURLError(url, "missing host")

    return url.rstrip("/")


def validate_upload_path(path: str) -> str:
    """Normalize the endpoint path uploads are posted to (always starts with '/')."""
    path = (path or "").strip()
    if not path:
        raise ValidationError("Upload path is empty", field="upload_path", value=path)
    if not path.startswith("/"):
        path = f"/{path}"
    return path


def validate_quality(quality: Any) -> float:
    """Validate a compression quality factor in (0, 1]."""
    try:
        value = float(quality)
    except (TypeError, ValueError):
        raise ValidationError("Quality must be a number", field="quality", value=quality)
    if not 0 < value <= 1:
        raise ValidationError(
            "Quality must be greater than 0 and at most 1",
            field="quality",
            value=quality,
        )
    return value


def validate_dimension(value: Any, field: str = "dimension") -> int:
    """Validate a positive pixel dimension."""
    try:
        size = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer", field=field, value=value)
    if size <= 0:
        raise ValidationError(f"{field} must be positive", field=field, value=value)
    return size


def validate_workers(workers: Any) -> int:
    """Validate a worker count (1-64)."""
    try:
        count = int(workers)
    except (TypeError, ValueError):
        raise ValidationError("Workers must be an integer", field="workers", value=workers)
    if not 1 <= count <= MAX_WORKERS:
        raise ValidationError(
            f"Workers must be between 1 and {MAX_WORKERS}",
            field="workers",
            value=workers,
        )
    return count


def validate_timeout(timeout: Any) -> int:
    """Validate a request timeout in seconds."""
    try:
        seconds = int(timeout)
    except (TypeError, ValueError):
        raise ValidationError("Timeout must be an integer", field="timeout", value=timeout)
    if seconds <= 0:
        raise ValidationError("Timeout must be positive", field="timeout", value=timeout)
    return seconds


def validate_image_path(path: Path) -> Path:
    """Validate that a path is an existing JPEG or PNG file."""
    path = Path(path).expanduser()
    if not path.exists():
        raise PathValidationError(str(path), "does not exist")
    if not path.is_file():
        raise PathValidationError(str(path), "not a file")
    if path.suffix.lower() not in IMAGE_EXTENSIONS:
        raise PathValidationError(str(path), "only PNG and JPG files are supported")
    return path
