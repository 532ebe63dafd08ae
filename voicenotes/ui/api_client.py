"""
Synchronous HTTP client for the Voice Notes AI backend API.

Uses ``httpx.Client`` (sync) because Streamlit scripts run synchronously.
"""

import logging
from datetime import datetime

import httpx
import streamlit as st

from voicenotes.core.exceptions import FetchError

logger = logging.getLogger(__name__)


class APIError(Exception):
    """User-friendly API error with categorized message.

    Categories: "connection", "timeout", "http", "network", "unknown".
    Used by the UI to display appropriate error messages.
    """

    def __init__(self, message: str, category: str = "unknown", status_code: int | None = None) -> None:
        self.message = message
        self.category = category
        self.status_code = status_code
        super().__init__(message)


class APIClient:
    """Thin synchronous wrapper around httpx for calling the FastAPI backend.

    All methods return parsed JSON or raise ``APIError`` with user-friendly
    messages for display in the UI.

    Args:
        base_url: Base URL of the Voice Notes AI backend.
        timeout: Request timeout in seconds.  Transcription and chat calls
            wait on remote AI services, so the default is generous.
        client: Optional pre-built ``httpx.Client`` (tests pass one with a
            ``MockTransport``).
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        timeout: float = 60.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(base_url=self._base_url, timeout=timeout)

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """Execute an HTTP request with user-friendly error handling.

        Raises:
            APIError: On connection, timeout, HTTP status, or network errors.
        """
        try:
            resp = self._client.request(method, path, **kwargs)
            resp.raise_for_status()
            return resp
        except httpx.ConnectError:
            raise APIError(
                "Backend server is not running. "
                "Start it with: `uvicorn voicenotes.api.app:app --reload --port 8000`",
                category="connection",
            ) from None
        except httpx.TimeoutException:
            raise APIError(
                "Request timed out. The server may be overloaded.",
                category="timeout",
            ) from None
        except httpx.HTTPStatusError as exc:
            try:
                detail = exc.response.json().get("detail", exc.response.text)
            except (ValueError, AttributeError):
                detail = exc.response.text or str(exc)
            raise APIError(
                str(detail), category="http", status_code=exc.response.status_code
            ) from None
        except httpx.HTTPError as exc:
            raise APIError(f"Network error: {exc}", category="network") from None

    def close(self) -> None:
        self._client.close()

    # -- health --

    def health_check(self) -> dict:
        return self._request("GET", "/health").json()

    def check_connection(self) -> tuple[bool, str]:
        """Check if the backend is reachable. Returns (ok, message)."""
        try:
            self.health_check()
            return True, "Connected"
        except APIError as exc:
            return False, exc.message

    # -- recordings --

    def save_recording(self, audio_base64: str, duration: str) -> dict:
        """Upload a recording; the backend stores the audio before the metadata."""
        body = {"audio_base64": audio_base64, "duration": duration}
        return self._request("POST", "/api/v1/recordings", json=body).json()

    def list_recordings(self, search: str | None = None) -> list[dict]:
        params = {"search": search} if search else None
        return self._request("GET", "/api/v1/recordings", params=params).json()

    def get_recording(self, recording_id: str) -> dict:
        return self._request("GET", f"/api/v1/recordings/{recording_id}").json()

    def get_audio_url(self, recording_id: str) -> str:
        """Freshly signed playback URL; ``APIError`` (503) means retry later."""
        data = self._request("GET", f"/api/v1/recordings/{recording_id}/audio-url").json()
        return data["audio_url"]

    def update_transcription(self, recording_id: str, transcription: str) -> dict:
        return self._request(
            "PATCH",
            f"/api/v1/recordings/{recording_id}/transcription",
            json={"transcription": transcription},
        ).json()

    def transcribe_recording(self, recording_id: str) -> dict:
        """Ask the backend to transcribe stored audio without a round trip through the UI."""
        return self._request("POST", f"/api/v1/recordings/{recording_id}/transcribe").json()

    # -- chat history --

    def list_messages(self, recording_id: str) -> list[dict]:
        return self._request("GET", f"/api/v1/recordings/{recording_id}/messages").json()

    def create_message(
        self,
        recording_id: str,
        role: str,
        content: str,
        timestamp: datetime | None = None,
    ) -> dict:
        body: dict = {"role": role, "content": content}
        if timestamp is not None:
            body["timestamp"] = timestamp.isoformat()
        return self._request(
            "POST", f"/api/v1/recordings/{recording_id}/messages", json=body
        ).json()

    # -- AI services --

    def transcribe(self, audio_base64: str) -> str:
        data = self._request(
            "POST", "/api/v1/transcriptions", json={"audio_base64": audio_base64}
        ).json()
        return data["text"]

    def chat(self, messages: list[dict], transcription: str) -> str:
        body = {"messages": messages, "transcription": transcription}
        return self._request("POST", "/api/v1/chat", json=body).json()["content"]

    # -- audio --

    def fetch_audio(self, url: str) -> bytes:
        """Download audio bytes from a signed URL.

        Raises:
            FetchError: On a network failure or a non-success status.
        """
        try:
            resp = self._client.get(url)
        except httpx.HTTPError as exc:
            raise FetchError(f"Failed to fetch audio: {exc}") from exc
        if resp.is_error:
            raise FetchError(
                f"Failed to fetch audio: {resp.status_code} {resp.reason_phrase}"
            )
        return resp.content


@st.cache_resource
def get_api_client(base_url: str = "http://localhost:8000") -> APIClient:
    """Return a cached APIClient, keyed by base_url.

    Uses Streamlit's ``cache_resource`` to persist the client across reruns.
    """
    return APIClient(base_url=base_url)
