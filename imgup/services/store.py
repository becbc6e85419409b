"""Upload record store.

Authoritative mapping of upload identifier to UploadRecord. Mutations are
serialized by a single lock; records are immutable and the mapping is
replaced on every write, so readers never take the lock and always see a
consistent mapping.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from typing import Any, Mapping, Optional

from imgup.core.exceptions import DuplicateIdentifier
from imgup.models.upload import UploadRecord

logger = logging.getLogger(__name__)


class UploadStore:
    """Concurrency-safe store of upload records."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: Mapping[str, UploadRecord] = {}

    # =========================================================================
    # Reads (lock-free)
    # =========================================================================

    def get(self, upload_id: str) -> Optional[UploadRecord]:
        """Return the current record for an identifier, or None."""
        return self._records.get(upload_id)

    def snapshot(self) -> list[UploadRecord]:
        """Return all records in submission order."""
        return list(self._records.values())

    def ids(self) -> list[str]:
        return list(self._records.keys())

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, upload_id: object) -> bool:
        return upload_id in self._records

    def __iter__(self) -> Iterator[UploadRecord]:
        return iter(self.snapshot())

    # =========================================================================
    # Writes (serialized)
    # =========================================================================

    def create(self, record: UploadRecord) -> UploadRecord:
        """Insert a new record.

        Raises:
            DuplicateIdentifier: If a record with the same identifier exists.
        """
        with self._lock:
            if record.upload_id in self._records:
                raise DuplicateIdentifier(record.upload_id)
            self._records = {**self._records, record.upload_id: record}
        return record

    def upsert(
        self,
        upload_id: str,
        *,
        expected_attempt: int | None = None,
        **changes: Any,
    ) -> Optional[UploadRecord]:
        """Merge changes into an existing record.

        Args:
            upload_id: Identifier of the record to update.
            expected_attempt: If given, apply the write only while the record is
                still on this attempt.
            **changes: UploadRecord fields to replace.

        Returns:
            The updated record, or None if the record is absent or the
            write belongs to a superseded attempt.
        """
        with self._lock:
            current = self._records.get(upload_id)
            if current is None:
                logger.debug("Ignoring update for unknown upload %s", upload_id)
                return None
            if expected_attempt is not None and current.attempt != expected_attempt:
                logger.debug(
                    "Ignoring stale update for upload %s (attempt %d, current %d)",
                    upload_id,
                    expected_attempt,
                    current.attempt,
                )
                return None

            updated = current.evolve(**changes)
            self._records = {**self._records, upload_id: updated}
        return updated
