"""
Recording lifecycle as an explicit state machine.

States: idle -> recording -> finalizing -> saved | error, and back to
recording from saved or error.  ``start``/``stop`` ignore calls that
arrive mid-transition; ``transition`` rejects anything else not listed in
``TRANSITIONS``.
"""

import logging
import time
from collections.abc import Callable
from enum import StrEnum

from voicenotes.core.exceptions import (
    DeviceUnavailableError,
    InvalidTransitionError,
    VoiceNotesError,
)
from voicenotes.core.utils import encode_audio_payload, format_duration
from voicenotes.ui.api_client import APIClient, APIError
from voicenotes.ui.state import PageState, RecordingView
from voicenotes.ui.waveform import take_duration_ms

logger = logging.getLogger(__name__)


class RecordingState(StrEnum):
    idle = "idle"
    recording = "recording"
    finalizing = "finalizing"
    saved = "saved"
    error = "error"


TRANSITIONS: dict[RecordingState, frozenset[RecordingState]] = {
    RecordingState.idle: frozenset({RecordingState.recording}),
    RecordingState.recording: frozenset({RecordingState.finalizing}),
    RecordingState.finalizing: frozenset({RecordingState.saved, RecordingState.error}),
    RecordingState.saved: frozenset({RecordingState.recording}),
    RecordingState.error: frozenset({RecordingState.recording}),
}


class RecordingWorkflow:
    """Drives browser-captured takes through the recording lifecycle.

    The browser widget delivers a finished take in one piece, so a take
    walks idle -> recording -> finalizing -> saved | error within
    ``submit``.  Streamlit reruns keep handing back the same take; it is
    recognised by its ``take_id`` and saved only once.

    Args:
        page: Page state receiving the saved recording and any error.
        api: Backend client used to save the take.
        clock: Monotonic clock in seconds, used when a take's length
            cannot be read from its header.
    """

    def __init__(
        self,
        page: PageState,
        api: APIClient,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._page = page
        self._api = api
        self._clock = clock
        self.state = RecordingState.idle
        self.started_at: float | None = None
        self.last_take_id: str | None = None

    @property
    def can_start(self) -> bool:
        return self.state not in (RecordingState.recording, RecordingState.finalizing)

    @property
    def can_stop(self) -> bool:
        return self.state is RecordingState.recording

    def transition(self, target: RecordingState) -> None:
        if target not in TRANSITIONS[self.state]:
            raise InvalidTransitionError(self.state.value, target.value)
        logger.debug("Recording state %s -> %s", self.state.value, target.value)
        self.state = target

    def elapsed_duration(self) -> str:
        if self.started_at is None:
            return "0:00"
        return format_duration((self._clock() - self.started_at) * 1000)

    def take_duration(self, audio: bytes) -> str:
        """Length of *audio* from its frame count, else the wall clock."""
        try:
            return format_duration(take_duration_ms(audio))
        except VoiceNotesError as exc:
            logger.warning("Could not read take length (%s); using elapsed time", exc.detail)
            return self.elapsed_duration()

    def start(self) -> None:
        """A take has begun. No-op while recording or saving."""
        if not self.can_start:
            return
        self.transition(RecordingState.recording)
        self.started_at = self._clock()

    def stop(self, audio: bytes) -> RecordingView | None:
        """The take ended with *audio*; save it. No-op unless recording."""
        if self.state is not RecordingState.recording:
            return None
        duration = self.take_duration(audio)
        self.transition(RecordingState.finalizing)
        return self.finalize(audio, duration)

    def submit(self, audio: bytes, take_id: str) -> RecordingView | None:
        """Handle a take from the browser widget exactly once.

        Raises:
            DeviceUnavailableError: If the browser delivered no audio
                (microphone missing or permission denied).
        """
        if take_id == self.last_take_id or self.state is RecordingState.finalizing:
            return None
        self.last_take_id = take_id
        if not audio:
            logger.warning("Browser delivered an empty take %s", take_id[:12])
            raise DeviceUnavailableError("The browser delivered no audio")

        self.start()
        return self.stop(audio)

    def _fail(self, local_url: str, message: str) -> None:
        self._page.blobs.revoke(local_url)
        self._page.set_error(f"Failed to save recording: {message}")
        self.transition(RecordingState.error)
        self.started_at = None

    def finalize(self, audio: bytes, duration: str) -> RecordingView | None:
        """Save a captured take and put it at the top of the list, selected.

        On failure the error is shown, the saving flag cleared, the local
        playback reference released, and nothing is added to the list.
        """
        if self.state is not RecordingState.finalizing:
            raise InvalidTransitionError(self.state.value, "finalize")

        page = self._page
        page.is_saving_recording = True
        local_url = page.blobs.create(audio, "audio/wav")
        try:
            data = self._api.save_recording(encode_audio_payload(audio), duration)
            recording = RecordingView.from_api(data, local_url=local_url, signed_at=page.clock())
        except APIError as exc:
            logger.error("Failed to save recording: %s", exc.message)
            self._fail(local_url, exc.message)
            return None
        except (KeyError, TypeError, ValueError) as exc:
            logger.error("Unexpected save response: %r", exc)
            self._fail(local_url, f"unexpected response from server ({exc})")
            return None
        finally:
            page.is_saving_recording = False

        page.prepend_recording(recording)
        page.select(recording.id)
        self.transition(RecordingState.saved)
        self.started_at = None
        logger.info("Recording %s saved (%s)", recording.id, duration)
        return recording
