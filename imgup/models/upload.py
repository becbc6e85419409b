"""Upload record models.

An UploadRecord is an immutable snapshot of one submitted image. The store
replaces records wholesale, so a record read by the presentation layer is
never modified underneath it.
"""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from imgup.core.cancellation import CancelToken
from imgup.models.base import BaseModel
from imgup.models.progress import percent_of


class UploadStatus(Enum):
    """Upload attempt status."""

    IN_PROGRESS = "progress"
    SUCCEEDED = "success"
    FAILED = "error"
    CANCELED = "canceled"

    @property
    def is_terminal(self) -> bool:
        return self is not UploadStatus.IN_PROGRESS

    @property
    def is_retriable(self) -> bool:
        return self in (UploadStatus.FAILED, UploadStatus.CANCELED)


@dataclass(frozen=True)
class ImageFile:
    """An in-memory image payload (source or compressed)."""

    name: str
    content: bytes = field(repr=False)
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)

    @classmethod
    def from_path(cls, path: Path) -> "ImageFile":
        """Read a file from disk, guessing its content type from the suffix."""
        path = Path(path)
        content_type, _ = mimetypes.guess_type(path.name)
        return cls(
            name=path.name,
            content=path.read_bytes(),
            content_type=content_type or "application/octet-stream",
        )


class UploadView(BaseModel):
    """Serializable view of an upload record for CLI output."""

    upload_id: str
    name: str
    status: str
    attempt: int
    original_size_bytes: int
    compressed_size_bytes: Optional[int] = None
    bytes_sent: int = 0
    progress_percent: int = 0
    compression_savings_percent: Optional[int] = None
    remote_location: Optional[str] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class UploadRecord:
    """State of one submitted image.

    Invariants maintained by the orchestrator:
    - cancel_handle is set iff status is IN_PROGRESS
    - remote_location is set iff status is SUCCEEDED
    - bytes_sent <= compressed_size_bytes once the latter is known
    """

    upload_id: str
    display_name: str
    source: ImageFile = field(repr=False)
    original_size_bytes: int
    status: UploadStatus = UploadStatus.IN_PROGRESS
    bytes_sent: int = 0
    compressed_size_bytes: Optional[int] = None
    remote_location: Optional[str] = None
    cancel_handle: Optional[CancelToken] = field(default=None, compare=False)
    attempt: int = 1
    error: Optional[str] = None

    @classmethod
    def create(
        cls,
        upload_id: str,
        source: ImageFile,
        cancel_handle: CancelToken,
    ) -> "UploadRecord":
        """Build the initial IN_PROGRESS record for a submitted file."""
        return cls(
            upload_id=upload_id,
            display_name=source.name,
            source=source,
            original_size_bytes=source.size,
            cancel_handle=cancel_handle,
        )

    def evolve(self, **changes: Any) -> "UploadRecord":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    @property
    def progress_percent(self) -> int:
        """Share of the compressed payload sent in the current attempt."""
        if not self.compressed_size_bytes:
            return 0
        return percent_of(self.bytes_sent, self.compressed_size_bytes)

    @property
    def compression_savings_percent(self) -> Optional[int]:
        """How much smaller the compressed payload is than the source."""
        if self.compressed_size_bytes is None or not self.original_size_bytes:
            return None
        return percent_of(
            self.original_size_bytes - self.compressed_size_bytes,
            self.original_size_bytes,
        )

    def to_view(self) -> UploadView:
        return UploadView(
            upload_id=self.upload_id,
            name=self.display_name,
            status=self.status.value,
            attempt=self.attempt,
            original_size_bytes=self.original_size_bytes,
            compressed_size_bytes=self.compressed_size_bytes,
            bytes_sent=self.bytes_sent,
            progress_percent=self.progress_percent,
            compression_savings_percent=self.compression_savings_percent,
            remote_location=self.remote_location,
            error=self.error,
        )
