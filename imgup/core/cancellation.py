"""Cooperative cancellation for upload attempts."""

from __future__ import annotations

import threading

from imgup.core.exceptions import TransportCanceled


class CancelToken:
    """Attempt-scoped cancellation capability.

    The owner of an attempt checks the token at its suspension points
    (before and after compression, on every streamed chunk). Cancelling
    only sets a flag; in-flight work is never preempted.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation. Calling this more than once has no extra effect."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        """Return True once cancellation has been requested."""
        return self._event.is_set()

    def raise_if_cancelled(self, upload_id: str | None = None) -> None:
        """Raise TransportCanceled if cancellation has been requested."""
        if self._event.is_set():
            raise TransportCanceled(upload_id)

    def __repr__(self) -> str:
        return f"CancelToken(cancelled={self.cancelled})"
