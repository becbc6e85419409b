"""Upload service for batch image uploads.

Provides UploadService, which drives every submitted image through
compress -> transfer -> finalize on its own worker task, and is the only
writer to the upload record store.

Per-item state machine::

    IN_PROGRESS -> SUCCEEDED | FAILED | CANCELED
    FAILED | CANCELED --retry--> IN_PROGRESS (new attempt)

Every write made by an attempt is tagged with its attempt number. A retry
bumps the number, so writes from a superseded attempt are dropped by the
store instead of clobbering the new attempt's state.
"""

from __future__ import annotations

import functools
import logging
import threading
import time
import uuid
from collections.abc import Callable, Iterable
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_futures
from pathlib import Path
from typing import Any, Optional

from imgup.core.cancellation import CancelToken
from imgup.core.exceptions import (
    CompressionFailure,
    DuplicateIdentifier,
    TransportCanceled,
    UploadError,
)
from imgup.core.validation import validate_image_path, validate_workers
from imgup.models.progress import AggregateProgress, BatchSummary
from imgup.models.upload import ImageFile, UploadRecord, UploadStatus
from imgup.services.progress import compute_aggregate_progress, summarize
from imgup.services.store import UploadStore
from imgup.uploaders.compression import CompressionSettings, compress_image
from imgup.uploaders.constants import DEFAULT_UPLOAD_WORKERS
from imgup.uploaders.transport import Transport

logger = logging.getLogger(__name__)

Compressor = Callable[..., ImageFile]


class UploadService:
    """Orchestrates concurrent, individually cancelable image uploads.

    Commands (`submit`, `cancel`, `retry`) return immediately; attempts run
    on a thread pool. Queries (`records`, `get`, `aggregate`, `summary`)
    read lock-free snapshots of the store.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        compressor: Optional[Compressor] = None,
        store: Optional[UploadStore] = None,
        settings: Optional[CompressionSettings] = None,
        workers: int = DEFAULT_UPLOAD_WORKERS,
    ) -> None:
        """Initialize the service.

        Args:
            transport: Sends compressed files to remote storage.
            compressor: Called as compressor(file, max_width=, max_height=,
                quality=). Defaults to the Pillow compressor using the
                settings' output format.
            store: Record store (a fresh one by default).
            settings: Compression parameters applied to every attempt.
            workers: Number of attempts that may run at the same time.
        """
        self.transport = transport
        self.settings = settings or CompressionSettings()
        self.compressor = compressor or functools.partial(
            compress_image, image_format=self.settings.image_format
        )
        self.store = store if store is not None else UploadStore()
        self.workers = validate_workers(workers)

        self._executor = ThreadPoolExecutor(
            max_workers=self.workers,
            thread_name_prefix="imgup-upload",
        )
        self._pending: set[Future[None]] = set()
        self._pending_lock = threading.Lock()
        self._closed = False

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close(self, *, cancel: bool = False) -> None:
        """Stop accepting work and wait for running attempts to settle.

        Args:
            cancel: If True, cancel every in-progress upload first.
        """
        if cancel:
            self.cancel_all()
        self._closed = True
        self._executor.shutdown(wait=True)

    def __enter__(self) -> UploadService:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until no attempt is queued or running.

        Args:
            timeout: Maximum seconds to wait; None waits indefinitely.

        Returns:
            True if everything settled, False on timeout.
        """
        deadline = None if timeout is None else time.monotonic() + timeout

        while True:
            with self._pending_lock:
                pending = set(self._pending)
            if not pending:
                return True

            remaining = None
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return False

            wait_futures(pending, timeout=remaining)

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("UploadService is closed")

    def _launch(self, upload_id: str, attempt: int, token: CancelToken) -> None:
        """Schedule an attempt, settling it as CANCELED if the pool is shut down.

        Raises:
            RuntimeError: If the executor no longer accepts work.
        """
        try:
            future = self._executor.submit(self._run_attempt, upload_id, attempt, token)
        except RuntimeError as e:
            token.cancel()
            self.store.upsert(
                upload_id,
                expected_attempt=attempt,
                status=UploadStatus.CANCELED,
                cancel_handle=None,
            )
            logger.warning("Upload %s not started, service is shutting down", upload_id)
            raise RuntimeError("UploadService is closed") from e

        with self._pending_lock:
            self._pending.add(future)
        future.add_done_callback(self._discard_future)

    def _discard_future(self, future: Future[None]) -> None:
        with self._pending_lock:
            self._pending.discard(future)

    # =========================================================================
    # Commands
    # =========================================================================

    def submit(self, files: Iterable[ImageFile]) -> list[str]:
        """Create one record per file and start an attempt for each.

        Does not wait for any attempt to finish.

        Args:
            files: Source images.

        Returns:
            Identifiers of the created uploads, in submission order.
        """
        self._ensure_open()
        upload_ids: list[str] = []

        for source in files:
            upload_id = uuid.uuid4().hex
            token = CancelToken()

            try:
                self.store.create(UploadRecord.create(upload_id, source, token))
            except DuplicateIdentifier as e:
                logger.error("Skipping %s: %s", source.name, e)
                continue

            logger.info("Queued upload %s (%s, %d bytes)", upload_id, source.name, source.size)
            self._launch(upload_id, 1, token)
            upload_ids.append(upload_id)

        return upload_ids

    def submit_paths(self, paths: Iterable[Path]) -> list[str]:
        """Read image files from disk and submit them.

        All paths are validated and read before anything is submitted.

        Raises:
            PathValidationError: If a path is missing or not a JPEG/PNG file.
        """
        sources = [ImageFile.from_path(validate_image_path(p)) for p in paths]
        return self.submit(sources)

    def cancel(self, upload_id: str) -> bool:
        """Signal the running attempt of an upload to stop.

        Cancellation is advisory: the attempt notices it at its next check
        and settles as CANCELED. Unknown or settled uploads are ignored.

        Returns:
            True if a cancellation signal was sent.
        """
        record = self.store.get(upload_id)
        if record is None or record.status is not UploadStatus.IN_PROGRESS:
            return False
        if record.cancel_handle is None:
            return False

        record.cancel_handle.cancel()
        logger.info("Cancel requested for upload %s (%s)", upload_id, record.display_name)
        return True

    def cancel_all(self) -> int:
        """Cancel every in-progress upload. Returns how many were signaled."""
        return sum(1 for record in self.store.snapshot() if self.cancel(record.upload_id))

    def retry(self, upload_id: str) -> bool:
        """Start a brand-new attempt for an upload, whatever its state.

        Retrying an upload that is still in progress supersedes the running
        attempt: its cancel handle is signaled and its remaining writes are
        discarded.

        Returns:
            False if the identifier is unknown.
        """
        self._ensure_open()

        while True:
            record = self.store.get(upload_id)
            if record is None:
                return False

            token = CancelToken()
            updated = self.store.upsert(
                upload_id,
                expected_attempt=record.attempt,
                attempt=record.attempt + 1,
                status=UploadStatus.IN_PROGRESS,
                bytes_sent=0,
                compressed_size_bytes=None,
                remote_location=None,
                error=None,
                cancel_handle=token,
            )
            if updated is not None:
                break
            # Lost a race with a concurrent retry; re-read and try again

        if record.cancel_handle is not None:
            record.cancel_handle.cancel()

        logger.info(
            "Retrying upload %s (%s), attempt %d, previous status %s",
            upload_id,
            record.display_name,
            updated.attempt,
            record.status.value,
        )
        self._launch(upload_id, updated.attempt, token)
        return True

    def retry_failed(self) -> list[str]:
        """Retry every FAILED or CANCELED upload. Returns the retried identifiers."""
        retried = []
        for record in self.store.snapshot():
            if record.status.is_retriable and self.retry(record.upload_id):
                retried.append(record.upload_id)
        return retried

    # =========================================================================
    # Queries
    # =========================================================================

    def get(self, upload_id: str) -> Optional[UploadRecord]:
        return self.store.get(upload_id)

    def records(self) -> list[UploadRecord]:
        """Snapshot of every upload record, in submission order."""
        return self.store.snapshot()

    def aggregate(self) -> AggregateProgress:
        """Batch-level progress, recomputed from the current records."""
        return compute_aggregate_progress(self.store.snapshot())

    def summary(self) -> BatchSummary:
        return summarize(self.store.snapshot())

    # =========================================================================
    # Attempt
    # =========================================================================

    def _run_attempt(self, upload_id: str, attempt: int, token: CancelToken) -> None:
        """Compress and send one upload, settling its record exactly once.

        Runs on a worker thread. Every failure is converted into a terminal
        record state; nothing propagates to the executor.
        """
        record = self.store.get(upload_id)
        if record is None or record.attempt != attempt:
            logger.debug("Upload %s attempt %d superseded before start", upload_id, attempt)
            return

        name = record.display_name

        def write(**changes: Any) -> Optional[UploadRecord]:
            return self.store.upsert(upload_id, expected_attempt=attempt, **changes)

        logger.debug("Starting upload %s (%s), attempt %d", upload_id, name, attempt)
        start_time = time.monotonic()

        try:
            token.raise_if_cancelled(upload_id)
            compressed = self._compress(record.source)
            token.raise_if_cancelled(upload_id)

            size = compressed.size
            write(compressed_size_bytes=size)

            def on_progress(bytes_sent: int) -> None:
                write(bytes_sent=max(0, min(bytes_sent, size)))

            result = self.transport.send(compressed, on_progress, token)

        except TransportCanceled:
            write(status=UploadStatus.CANCELED, cancel_handle=None)
            logger.info("Upload %s (%s) canceled", upload_id, name)

        except UploadError as e:
            write(status=UploadStatus.FAILED, cancel_handle=None, error=str(e))
            logger.warning("Upload %s (%s) failed: %s", upload_id, name, e)

        except Exception as e:
            write(
                status=UploadStatus.FAILED,
                cancel_handle=None,
                error=str(e) or type(e).__name__,
            )
            logger.exception("Unexpected error uploading %s (%s)", upload_id, name)

        else:
            write(
                status=UploadStatus.SUCCEEDED,
                bytes_sent=size,
                remote_location=result.remote_location,
                cancel_handle=None,
            )
            logger.info(
                "Upload %s (%s) succeeded in %.2fs: %s",
                upload_id,
                name,
                time.monotonic() - start_time,
                result.remote_location,
            )

    def _compress(self, source: ImageFile) -> ImageFile:
        """Run the compressor, reporting any error as a CompressionFailure."""
        try:
            return self.compressor(
                source,
                max_width=self.settings.max_width,
                max_height=self.settings.max_height,
                quality=self.settings.quality,
            )
        except (CompressionFailure, TransportCanceled):
            raise
        except Exception as e:
            raise CompressionFailure(source.name, str(e) or type(e).__name__) from e
