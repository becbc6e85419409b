"""Pytest configuration and fixtures for imgup tests."""

from __future__ import annotations

import io
import tempfile
import threading
from pathlib import Path
from typing import Callable, Generator

import pytest
from PIL import Image

from imgup.core.cancellation import CancelToken
from imgup.core.exceptions import TransportCanceled, TransportFailure
from imgup.models.upload import ImageFile
from imgup.uploaders.transport import TransportResult


def make_image_bytes(
    size: tuple[int, int] = (64, 48),
    fmt: str = "PNG",
    mode: str = "RGB",
    color: tuple[int, ...] = (200, 30, 30),
) -> bytes:
    """Render a solid-color image into encoded bytes."""
    image = Image.new(mode, size, color)
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


def shrink(file: ImageFile, **_settings: object) -> ImageFile:
    """Compressor stand-in that halves the payload."""
    return ImageFile(
        name=f"{Path(file.name).stem}.webp",
        content=file.content[: max(1, file.size // 2)],
        content_type="image/webp",
    )


class FakeTransport:
    """In-memory transport that reports progress in fixed chunks."""

    def __init__(self, chunk_size: int = 4, base_url: str = "https://cdn.example.org") -> None:
        self.chunk_size = chunk_size
        self.base_url = base_url
        self.sent: list[str] = []
        self.progress: dict[str, list[int]] = {}
        self._lock = threading.Lock()

    def send(
        self,
        file: ImageFile,
        on_progress: Callable[[int], None],
        cancel_token: CancelToken,
    ) -> TransportResult:
        cancel_token.raise_if_cancelled()
        reported = []
        for offset in range(self.chunk_size, file.size + self.chunk_size, self.chunk_size):
            cancel_token.raise_if_cancelled()
            sent = min(offset, file.size)
            on_progress(sent)
            reported.append(sent)
        with self._lock:
            self.sent.append(file.name)
            self.progress[file.name] = reported
        return TransportResult(remote_location=f"{self.base_url}/{file.name}")


class BlockingTransport:
    """Transport that parks each send until released or canceled.

    `started` is set once a send reports its first chunk. `release` lets
    every parked send finish successfully.
    """

    def __init__(self, first_chunk: int = 3) -> None:
        self.first_chunk = first_chunk
        self.started = threading.Event()
        self.release = threading.Event()
        self.calls = 0
        self._lock = threading.Lock()

    def send(
        self,
        file: ImageFile,
        on_progress: Callable[[int], None],
        cancel_token: CancelToken,
    ) -> TransportResult:
        with self._lock:
            self.calls += 1
        cancel_token.raise_if_cancelled()
        on_progress(min(self.first_chunk, file.size))
        self.started.set()

        while not self.release.wait(0.01):
            cancel_token.raise_if_cancelled()

        cancel_token.raise_if_cancelled()
        on_progress(file.size)
        return TransportResult(remote_location=f"https://cdn.example.org/{file.name}")


class FailingTransport:
    """Transport that fails a fixed number of sends, then succeeds."""

    def __init__(self, failures: int = 1, status_code: int = 500) -> None:
        self.failures = failures
        self.status_code = status_code
        self.calls = 0
        self._lock = threading.Lock()

    def send(
        self,
        file: ImageFile,
        on_progress: Callable[[int], None],
        cancel_token: CancelToken,
    ) -> TransportResult:
        with self._lock:
            self.calls += 1
            fail = self.calls <= self.failures
        if fail:
            raise TransportFailure(f"HTTP {self.status_code}", status_code=self.status_code)
        on_progress(file.size)
        return TransportResult(remote_location=f"https://cdn.example.org/{file.name}")


class CancelingTransport:
    """Transport that observes cancellation on its first chunk."""

    def send(
        self,
        file: ImageFile,
        on_progress: Callable[[int], None],
        cancel_token: CancelToken,
    ) -> TransportResult:
        raise TransportCanceled()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def png_bytes() -> bytes:
    """Encoded 64x48 PNG image."""
    return make_image_bytes()


@pytest.fixture
def jpeg_bytes() -> bytes:
    """Encoded 64x48 JPEG image."""
    return make_image_bytes(fmt="JPEG")


@pytest.fixture
def sample_image(png_bytes: bytes) -> ImageFile:
    """In-memory PNG source image."""
    return ImageFile(name="photo.png", content=png_bytes, content_type="image/png")


@pytest.fixture
def image_dir(temp_dir: Path, png_bytes: bytes, jpeg_bytes: bytes) -> Path:
    """Directory with two images, a nested image and some non-image files."""
    (temp_dir / "a.png").write_bytes(png_bytes)
    (temp_dir / "b.jpg").write_bytes(jpeg_bytes)
    (temp_dir / "notes.txt").write_text("not an image")
    nested = temp_dir / "nested"
    nested.mkdir()
    (nested / "c.jpeg").write_bytes(jpeg_bytes)
    hidden = temp_dir / ".cache"
    hidden.mkdir()
    (hidden / "d.png").write_bytes(png_bytes)
    return temp_dir


@pytest.fixture
def sample_config_yaml() -> str:
    """Sample config YAML content."""
    return """
default_profile: test
output_format: table

profiles:
  test:
    url: https://img-test.example.org
    upload_path: /api/uploads
    verify_ssl: false
    timeout: 30
    quality: 0.6
    image_format: jpeg

  production:
    url: https://img.example.org
    verify_ssl: true
    timeout: 60
    workers: 8
"""
