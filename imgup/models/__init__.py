"""Data models for imgup.

Provides the upload record state, serializable views, and batch progress
models.
"""

from __future__ import annotations

from .base import BaseModel
from .progress import AggregateProgress, BatchSummary, percent_of
from .upload import ImageFile, UploadRecord, UploadStatus, UploadView

__all__ = [
    # Base
    "BaseModel",
    # Uploads
    "ImageFile",
    "UploadRecord",
    "UploadStatus",
    "UploadView",
    # Progress
    "AggregateProgress",
    "BatchSummary",
    "percent_of",
]
