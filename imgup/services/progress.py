"""Aggregate progress for a batch of uploads.

Both functions are pure: they are recomputed from a store snapshot on
every query and keep no state between calls.
"""

from __future__ import annotations

from collections.abc import Iterable

from imgup.models.progress import AggregateProgress, BatchSummary, percent_of
from imgup.models.upload import UploadRecord, UploadStatus


def compute_aggregate_progress(records: Iterable[UploadRecord]) -> AggregateProgress:
    """Compute the batch completion percentage.

    Once nothing is in progress the batch counts as settled (100%),
    whatever the individual outcomes. Otherwise bytes sent are counted only
    for records whose compression has finished, against a denominator that
    uses the compressed size when known and the original size as an
    estimate before that.
    """
    records = list(records)
    any_in_progress = any(r.status is UploadStatus.IN_PROGRESS for r in records)

    if not any_in_progress:
        return AggregateProgress(any_in_progress=False, aggregate_percentage=100)

    sent = 0
    total = 0
    for record in records:
        if record.compressed_size_bytes is not None:
            sent += record.bytes_sent
            total += record.compressed_size_bytes
        else:
            total += record.original_size_bytes

    return AggregateProgress(
        any_in_progress=True,
        aggregate_percentage=max(0, percent_of(sent, total)),
    )


def summarize(records: Iterable[UploadRecord]) -> BatchSummary:
    """Count records per status and total their sizes."""
    counts = {status: 0 for status in UploadStatus}
    original_bytes = 0
    compressed_bytes = 0
    total = 0

    for record in records:
        total += 1
        counts[record.status] += 1
        original_bytes += record.original_size_bytes
        if record.compressed_size_bytes is not None:
            compressed_bytes += record.compressed_size_bytes

    return BatchSummary(
        total=total,
        in_progress=counts[UploadStatus.IN_PROGRESS],
        succeeded=counts[UploadStatus.SUCCEEDED],
        failed=counts[UploadStatus.FAILED],
        canceled=counts[UploadStatus.CANCELED],
        original_bytes=original_bytes,
        compressed_bytes=compressed_bytes,
    )
