"""Tests for the UI transcription step."""

from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest

from voicenotes.core.exceptions import FetchError
from voicenotes.core.utils import decode_audio_payload
from voicenotes.ui.api_client import APIClient, APIError
from voicenotes.ui.state import PageState, RecordingView
from voicenotes.ui.workflows.transcription import TRANSCRIBE_FAILED, TranscriptionStep

TEXT = "We discussed the Q3 budget and approved it."


def _recording(**kwargs) -> RecordingView:
    defaults = {
        "id": "rec1",
        "duration": "0:10",
        "timestamp": datetime(2026, 1, 1, tzinfo=UTC),
        "audio_key": "recording_1.wav",
        "audio_url": "https://signed.example/recording_1.wav",
    }
    defaults.update(kwargs)
    return RecordingView(**defaults)


@pytest.fixture
def page():
    state = PageState(recordings=[_recording()])
    state.select("rec1")
    return state


@pytest.fixture
def api():
    client = MagicMock(spec=APIClient)
    client.fetch_audio.return_value = b"remote-audio"
    client.transcribe.return_value = TEXT
    return client


@pytest.fixture
def step(page, api):
    return TranscriptionStep(page, api)


def test_success_updates_list_selection_and_persists(step, page, api):
    assert step.run() == TEXT

    api.fetch_audio.assert_called_once_with("https://signed.example/recording_1.wav")
    assert decode_audio_payload(api.transcribe.call_args.args[0]) == b"remote-audio"
    assert page.recordings[0].transcription == TEXT
    assert page.selected.transcription == TEXT
    api.update_transcription.assert_called_once_with("rec1", TEXT)
    assert not page.is_transcribing
    assert page.error is None


def test_local_blob_used_without_fetch(step, page, api):
    url = page.blobs.create(b"local-take")
    page.update_recording("rec1", local_url=url)

    step.run("rec1")

    api.fetch_audio.assert_not_called()
    assert decode_audio_payload(api.transcribe.call_args.args[0]) == b"local-take"


def test_transcription_failure_leaves_text_absent(step, page, api):
    """A non-OK transcription response shows an error and clears the in-flight flag."""
    api.transcribe.side_effect = APIError("Transcription failed: Bad Gateway", "http", 502)

    assert step.run() is None

    assert page.selected.transcription is None
    assert page.error == TRANSCRIBE_FAILED
    assert not page.is_transcribing
    api.update_transcription.assert_not_called()


def test_fetch_failure(step, page, api):
    """Still failing after a fresh signature: the generic error, nothing persisted."""
    api.fetch_audio.side_effect = FetchError("Failed to fetch audio: 404 Not Found")
    api.get_audio_url.return_value = "https://signed.example/fresh"

    assert step.run() is None

    assert api.fetch_audio.call_count == 2
    assert page.error == TRANSCRIBE_FAILED
    api.transcribe.assert_not_called()
    assert not page.is_transcribing


def test_missing_url_asks_for_retry(page, api):
    """No signed URL and none available yet: a retry-needed error, no crash."""
    page.update_recording("rec1", audio_url=None)
    api.get_audio_url.side_effect = APIError("Audio URL unavailable", "http", 503)

    assert TranscriptionStep(page, api).run() is None

    assert "retry later" in page.error
    api.transcribe.assert_not_called()
    assert page.selected.transcription is None
    assert not page.is_transcribing


def test_missing_url_is_refreshed(page, api):
    page.update_recording("rec1", audio_url=None)
    api.get_audio_url.return_value = "https://signed.example/fresh"

    assert TranscriptionStep(page, api).run() == TEXT

    api.fetch_audio.assert_called_once_with("https://signed.example/fresh")
    assert page.selected.audio_url == "https://signed.example/fresh"


def test_ignored_while_in_flight(step, page, api):
    page.is_transcribing = True
    assert step.run() is None
    api.transcribe.assert_not_called()


def test_persist_failure_keeps_transcript_in_memory(step, page, api):
    api.update_transcription.side_effect = APIError("db down", "http", 500)

    assert step.run() == TEXT

    assert page.selected.transcription == TEXT
    assert page.error == "Failed to save transcription: db down"
    assert not page.is_transcribing


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_rejected_cached_url_is_signed_again(step, page, api):
    """An expired signature (403) is replaced once and the fetch repeated."""
    api.fetch_audio.side_effect = [
        FetchError("Failed to fetch audio: 403 Forbidden"),
        b"remote-audio",
    ]
    api.get_audio_url.return_value = "https://signed.example/fresh"

    assert step.run() == TEXT

    api.get_audio_url.assert_called_once_with("rec1")
    assert [c.args[0] for c in api.fetch_audio.call_args_list] == [
        "https://signed.example/recording_1.wav",
        "https://signed.example/fresh",
    ]
    assert page.selected.audio_url == "https://signed.example/fresh"
    assert page.error is None


def test_url_older_than_lifetime_is_signed_before_fetch(api):
    clock = FakeClock()
    page = PageState(recordings=[_recording(audio_url_signed_at=0.0)], clock=clock)
    page.select("rec1")
    clock.now = 3600.0
    api.get_audio_url.return_value = "https://signed.example/fresh"

    assert TranscriptionStep(page, api).run() == TEXT

    api.fetch_audio.assert_called_once_with("https://signed.example/fresh")
    assert page.selected.audio_url_signed_at == 3600.0


def test_recent_url_is_reused(api):
    clock = FakeClock()
    page = PageState(recordings=[_recording(audio_url_signed_at=0.0)], clock=clock)
    page.select("rec1")
    clock.now = 600.0

    TranscriptionStep(page, api).run()

    api.get_audio_url.assert_not_called()
    api.fetch_audio.assert_called_once_with("https://signed.example/recording_1.wav")


def test_rejected_url_that_cannot_be_resigned_asks_for_retry(step, page, api):
    api.fetch_audio.side_effect = FetchError("Failed to fetch audio: 403 Forbidden")
    api.get_audio_url.side_effect = APIError("Audio URL unavailable", "http", 503)

    assert step.run() is None

    assert "retry later" in page.error
    api.transcribe.assert_not_called()
    assert not page.is_transcribing


def test_released_local_audio_falls_back_to_storage(step, page, api):
    url = page.blobs.create(b"local-take")
    page.update_recording("rec1", local_url=url)
    page.blobs.revoke(url)

    assert step.run() == TEXT

    api.fetch_audio.assert_called_once_with("https://signed.example/recording_1.wav")
