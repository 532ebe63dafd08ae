"""Unit tests for the Streamlit-side APIClient.

Validates that the client calls the right endpoints with the right bodies,
maps failures to categorized ``APIError``s, and raises ``FetchError`` for
signed-URL downloads that fail.
"""

import json
from datetime import UTC, datetime

import httpx
import pytest

from voicenotes.core.exceptions import FetchError
from voicenotes.ui.api_client import APIClient, APIError


def _client(handler) -> APIClient:
    http = httpx.Client(base_url="http://test:8000", transport=httpx.MockTransport(handler))
    return APIClient(client=http)


class Recorder:
    """MockTransport handler that remembers requests and returns canned JSON."""

    def __init__(self, payload, status: int = 200) -> None:
        self.payload = payload
        self.status = status
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status, json=self.payload)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.content)


class TestEndpoints:
    def test_save_recording(self):
        handler = Recorder({"id": "abc"})
        result = _client(handler).save_recording("UklGRg==", "1:05")
        assert handler.last.method == "POST"
        assert handler.last.url.path == "/api/v1/recordings"
        assert handler.last_json() == {"audio_base64": "UklGRg==", "duration": "1:05"}
        assert result == {"id": "abc"}

    def test_list_recordings_with_search(self):
        handler = Recorder([])
        _client(handler).list_recordings(search="ab")
        assert handler.last.url.params["search"] == "ab"

    def test_list_recordings_without_search(self):
        handler = Recorder([])
        _client(handler).list_recordings()
        assert "search" not in handler.last.url.params

    def test_get_audio_url(self):
        handler = Recorder({"recording_id": "abc", "audio_url": "https://s", "expires_in": 3600})
        assert _client(handler).get_audio_url("abc") == "https://s"
        assert handler.last.url.path == "/api/v1/recordings/abc/audio-url"

    def test_update_transcription(self):
        handler = Recorder({"id": "abc"})
        _client(handler).update_transcription("abc", "hello")
        assert handler.last.method == "PATCH"
        assert handler.last.url.path == "/api/v1/recordings/abc/transcription"
        assert handler.last_json() == {"transcription": "hello"}

    def test_create_message_serializes_timestamp(self):
        handler = Recorder({"id": "m1"})
        ts = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
        _client(handler).create_message("abc", "user", "hi", ts)
        assert handler.last.url.path == "/api/v1/recordings/abc/messages"
        assert handler.last_json() == {
            "role": "user",
            "content": "hi",
            "timestamp": "2026-01-01T12:00:00+00:00",
        }

    def test_transcribe_returns_text(self):
        handler = Recorder({"text": "hello world"})
        assert _client(handler).transcribe("UklGRg==") == "hello world"
        assert handler.last.url.path == "/api/v1/transcriptions"

    def test_chat_returns_content(self):
        handler = Recorder({"content": "reply"})
        messages = [{"role": "user", "content": "hi"}]
        assert _client(handler).chat(messages, "transcript") == "reply"
        assert handler.last_json() == {"messages": messages, "transcription": "transcript"}


class TestErrors:
    def test_http_error_uses_detail(self):
        handler = Recorder({"detail": "Recording not found: x", "code": "RECORDING_NOT_FOUND"}, 404)
        with pytest.raises(APIError) as exc_info:
            _client(handler).get_recording("x")
        assert exc_info.value.category == "http"
        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Recording not found: x"

    def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(APIError) as exc_info:
            _client(handler).health_check()
        assert exc_info.value.category == "connection"

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(APIError) as exc_info:
            _client(handler).list_recordings()
        assert exc_info.value.category == "timeout"

    def test_check_connection_reports_failure(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        ok, message = _client(handler).check_connection()
        assert ok is False
        assert "not running" in message


class TestFetchAudio:
    def test_returns_bytes_from_absolute_url(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, content=b"audio-bytes")

        assert _client(handler).fetch_audio("https://bucket.example/k.wav?sig=1") == b"audio-bytes"
        assert seen[0].url.host == "bucket.example"

    def test_non_ok_raises_fetch_error(self):
        client = _client(lambda request: httpx.Response(403))
        with pytest.raises(FetchError, match="403 Forbidden"):
            client.fetch_audio("https://bucket.example/k.wav")

    def test_network_failure_raises_fetch_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(FetchError):
            _client(handler).fetch_audio("https://bucket.example/k.wav")
