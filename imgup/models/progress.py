"""Progress models for batch uploads.

Provides the aggregate progress view and the batch summary derived from
the upload records.
"""

from __future__ import annotations

import math
from dataclasses import dataclass


def percent_of(part: int, whole: int) -> int:
    """Return 100 * part / whole rounded half up, capped at 100.

    A zero whole counts as complete.
    """
    if whole <= 0:
        return 100
    return min(math.floor(part * 100 / whole + 0.5), 100)


@dataclass(frozen=True)
class AggregateProgress:
    """Completion of the whole batch as of one store snapshot."""

    any_in_progress: bool
    aggregate_percentage: int

    def to_dict(self) -> dict[str, object]:
        return {
            "any_in_progress": self.any_in_progress,
            "aggregate_percentage": self.aggregate_percentage,
        }


@dataclass(frozen=True)
class BatchSummary:
    """Per-status counts and byte totals for a batch."""

    total: int = 0
    in_progress: int = 0
    succeeded: int = 0
    failed: int = 0
    canceled: int = 0
    original_bytes: int = 0
    compressed_bytes: int = 0

    @property
    def success(self) -> bool:
        """True when every upload in a non-empty batch succeeded."""
        return self.total > 0 and self.succeeded == self.total

    @property
    def settled(self) -> bool:
        """True once nothing is in progress."""
        return self.in_progress == 0

    @property
    def savings_percent(self) -> int | None:
        """Size reduction of the compressed uploads, if any were compressed."""
        if not self.original_bytes or not self.compressed_bytes:
            return None
        return percent_of(self.original_bytes - self.compressed_bytes, self.original_bytes)

    def to_dict(self) -> dict[str, object]:
        return {
            "total": self.total,
            "in_progress": self.in_progress,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "canceled": self.canceled,
            "original_bytes": self.original_bytes,
            "compressed_bytes": self.compressed_bytes,
        }
