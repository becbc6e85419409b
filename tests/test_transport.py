"""Tests for imgup.uploaders.transport module."""

from __future__ import annotations

import httpx
import pytest

from imgup.core.cancellation import CancelToken
from imgup.core.exceptions import InvalidURLError, TransportCanceled, TransportFailure
from imgup.models.upload import ImageFile
from imgup.uploaders.transport import HttpTransport, StorageResponse, Transport, TransportResult


def _file(content: bytes = b"0123456789") -> ImageFile:
    return ImageFile(name="photo.webp", content=content, content_type="image/webp")


def _json_handler(payload: dict, status_code: int = 200, seen: list | None = None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, json=payload)

    return handler


def _transport(handler, **kwargs) -> HttpTransport:
    return HttpTransport(
        "https://img.example.org/",
        upload_path="api/uploads",
        chunk_size=4,
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


class TestHttpTransportInit:
    """Tests for HttpTransport configuration."""

    def test_url_is_normalized(self):
        transport = HttpTransport("https://img.example.org/", upload_path="api/uploads")

        assert transport.base_url == "https://img.example.org"
        assert transport.url == "https://img.example.org/api/uploads"

    def test_invalid_url_rejected(self):
        with pytest.raises(InvalidURLError):
            HttpTransport("ftp://img.example.org")

    def test_satisfies_protocol(self):
        assert isinstance(HttpTransport("http://localhost:3333"), Transport)


class TestHttpTransportSend:
    """Tests for HttpTransport.send."""

    def test_success_returns_remote_location(self):
        seen: list[httpx.Request] = []
        transport = _transport(
            _json_handler({"url": "https://cdn.example.org/abc.webp"}, seen=seen)
        )
        progress: list[int] = []

        result = transport.send(_file(), progress.append, CancelToken())

        assert result == TransportResult(remote_location="https://cdn.example.org/abc.webp")
        assert progress == [4, 8, 10]

        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == "https://img.example.org/api/uploads"
        assert request.headers["content-type"].startswith("multipart/form-data")
        body = request.content
        assert b'name="file"' in body
        assert b'filename="photo.webp"' in body
        assert b"Content-Type: image/webp" in body
        assert b"0123456789" in body

    def test_custom_field_name(self):
        seen: list[httpx.Request] = []
        transport = _transport(
            _json_handler({"url": "https://cdn.example.org/x"}, seen=seen),
            field_name="image",
        )

        transport.send(_file(), lambda _: None, CancelToken())

        assert b'name="image"' in seen[0].content

    def test_extra_response_fields_ignored(self):
        transport = _transport(_json_handler({"url": "https://cdn.example.org/x", "id": 7}))

        result = transport.send(_file(), lambda _: None, CancelToken())

        assert result.remote_location == "https://cdn.example.org/x"

    def test_http_error_raises_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="storage exploded")

        transport = _transport(handler)

        with pytest.raises(TransportFailure) as exc_info:
            transport.send(_file(), lambda _: None, CancelToken())

        assert exc_info.value.status_code == 500
        assert "HTTP 500: storage exploded" in str(exc_info.value)

    def test_non_json_response_raises_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>ok</html>")

        with pytest.raises(TransportFailure, match="Unexpected response"):
            _transport(handler).send(_file(), lambda _: None, CancelToken())

    def test_missing_url_field_raises_failure(self):
        transport = _transport(_json_handler({"path": "/tmp/x"}))

        with pytest.raises(TransportFailure, match="Unexpected response"):
            transport.send(_file(), lambda _: None, CancelToken())

    def test_connection_error_raises_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(TransportFailure, match="Connection failed"):
            _transport(handler).send(_file(), lambda _: None, CancelToken())

    def test_timeout_raises_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(TransportFailure, match="timed out"):
            _transport(handler).send(_file(), lambda _: None, CancelToken())


class TestHttpTransportCancellation:
    """Tests for cancellation during send."""

    def test_canceled_before_send(self):
        calls: list[httpx.Request] = []
        transport = _transport(_json_handler({"url": "x"}, seen=calls))
        token = CancelToken()
        token.cancel()

        with pytest.raises(TransportCanceled):
            transport.send(_file(), lambda _: None, token)

        assert calls == []

    def test_canceled_mid_stream(self):
        calls: list[httpx.Request] = []
        transport = _transport(_json_handler({"url": "x"}, seen=calls))
        token = CancelToken()
        progress: list[int] = []

        def on_progress(sent: int) -> None:
            progress.append(sent)
            token.cancel()

        with pytest.raises(TransportCanceled):
            transport.send(_file(), on_progress, token)

        assert progress == [4]
        assert calls == []

    def test_error_after_cancel_reports_canceled(self):
        token = CancelToken()

        def handler(request: httpx.Request) -> httpx.Response:
            token.cancel()
            raise httpx.ReadError("connection reset", request=request)

        with pytest.raises(TransportCanceled):
            _transport(handler).send(_file(), lambda _: None, token)


class TestStorageResponse:
    """Tests for StorageResponse model."""

    def test_strips_whitespace(self):
        assert StorageResponse.model_validate({"url": " https://x/y "}).url == "https://x/y"
