"""HTTP transport for compressed images.

Posts one file as multipart/form-data to the storage endpoint, reporting
cumulative bytes as the body is streamed and checking the cancel token on
every chunk.

This is an internal implementation detail. Use `UploadService` from
`imgup.services.uploads` as the public API.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import httpx
from pydantic import ValidationError as PydanticValidationError

from imgup.core.cancellation import CancelToken
from imgup.core.exceptions import TransportCanceled, TransportFailure
from imgup.core.validation import validate_server_url, validate_upload_path
from imgup.models.base import BaseModel
from imgup.models.upload import ImageFile
from imgup.uploaders.constants import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_FIELD_NAME,
    DEFAULT_TIMEOUT,
    DEFAULT_UPLOAD_PATH,
)

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]


# =============================================================================
# Data Classes
# =============================================================================


class StorageResponse(BaseModel):
    """JSON body returned by the storage endpoint."""

    url: str


@dataclass(frozen=True)
class TransportResult:
    """Outcome of a successful send."""

    remote_location: str


@runtime_checkable
class Transport(Protocol):
    """Interface the orchestrator uses to move bytes to remote storage."""

    def send(
        self,
        file: ImageFile,
        on_progress: ProgressCallback,
        cancel_token: CancelToken,
    ) -> TransportResult:
        """Send file, raising TransportCanceled or TransportFailure."""
        ...


# =============================================================================
# Streaming Body
# =============================================================================


class _ProgressReader(io.BytesIO):
    """File-like body that reports bytes handed to the HTTP client.

    httpx reads multipart file fields in chunks; each read checks the
    cancel token before producing data and reports the cumulative offset
    after it.
    """

    def __init__(
        self,
        content: bytes,
        on_progress: ProgressCallback,
        cancel_token: CancelToken,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        super().__init__(content)
        self._on_progress = on_progress
        self._cancel_token = cancel_token
        self._chunk_size = chunk_size

    def read(self, size: int | None = -1) -> bytes:
        self._cancel_token.raise_if_cancelled()
        if size is None or size < 0 or size > self._chunk_size:
            size = self._chunk_size
        chunk = super().read(size)
        if chunk:
            self._on_progress(self.tell())
        return chunk


# =============================================================================
# HTTP Transport
# =============================================================================


class HttpTransport:
    """Multipart POST transport backed by httpx.

    A fresh httpx client is created for every send so concurrent attempts
    never share connection state.
    """

    def __init__(
        self,
        base_url: str,
        *,
        upload_path: str = DEFAULT_UPLOAD_PATH,
        field_name: str = DEFAULT_FIELD_NAME,
        timeout: float = DEFAULT_TIMEOUT,
        verify_ssl: bool = True,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            base_url: Storage server URL.
            upload_path: Endpoint path files are posted to.
            field_name: Multipart field name for the file.
            timeout: HTTP timeout in seconds.
            verify_ssl: Whether to verify SSL certificates.
            chunk_size: Bytes per streamed chunk (progress granularity).
            transport: Optional httpx transport (used for testing).
        """
        self.base_url = validate_server_url(base_url)
        self.upload_path = validate_upload_path(upload_path)
        self.field_name = field_name
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self.chunk_size = chunk_size
        self._transport = transport

    @property
    def url(self) -> str:
        return f"{self.base_url}{self.upload_path}"

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            timeout=self.timeout,
            verify=self.verify_ssl,
            transport=self._transport,
        )

    def send(
        self,
        file: ImageFile,
        on_progress: ProgressCallback,
        cancel_token: CancelToken,
    ) -> TransportResult:
        """Upload a file and return where the server stored it.

        Args:
            file: Compressed image to send.
            on_progress: Called with cumulative bytes of the file sent so far.
            cancel_token: Checked before the request and on every chunk.

        Returns:
            TransportResult with the remote location.

        Raises:
            TransportCanceled: If cancellation was observed.
            TransportFailure: On network errors, HTTP errors, or a malformed response.
        """
        cancel_token.raise_if_cancelled()

        body = _ProgressReader(file.content, on_progress, cancel_token, self.chunk_size)
        files = {self.field_name: (file.name, body, file.content_type)}

        try:
            with self._client() as client:
                resp = client.post(self.upload_path, files=files)
        except TransportCanceled:
            raise
        except httpx.TimeoutException as e:
            if cancel_token.cancelled:
                raise TransportCanceled() from e
            raise TransportFailure(f"Upload timed out: {e}", url=self.url) from e
        except httpx.HTTPError as e:
            if cancel_token.cancelled:
                raise TransportCanceled() from e
            raise TransportFailure(f"Connection failed: {e}", url=self.url) from e

        if resp.status_code >= 400:
            snippet = resp.text.strip().replace("\n", " ")[:200]
            detail = f"HTTP {resp.status_code}"
            if snippet:
                detail = f"{detail}: {snippet}"
            raise TransportFailure(detail, url=self.url, status_code=resp.status_code)

        try:
            stored = StorageResponse.model_validate(resp.json())
        except (ValueError, PydanticValidationError) as e:
            raise TransportFailure(
                f"Unexpected response from storage: {e}",
                url=self.url,
                status_code=resp.status_code,
            ) from e

        logger.debug("Stored %s at %s", file.name, stored.url)
        return TransportResult(remote_location=stored.url)
