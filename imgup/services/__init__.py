"""Upload orchestration services for imgup."""

from imgup.services.progress import compute_aggregate_progress, summarize
from imgup.services.store import UploadStore
from imgup.services.uploads import UploadService

__all__ = [
    "UploadService",
    "UploadStore",
    "compute_aggregate_progress",
    "summarize",
]
