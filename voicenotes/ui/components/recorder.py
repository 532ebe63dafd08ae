"""
Recorder component: browser microphone capture via ``st.audio_input``.

The widget records in the user's browser and hands back the finished take;
``RecordingWorkflow`` saves it once and tracks idle -> recording ->
finalizing -> saved | error.
"""

import hashlib
import logging

import streamlit as st

from voicenotes.core.exceptions import DeviceUnavailableError
from voicenotes.ui.state import PageState
from voicenotes.ui.workflows.recording import RecordingState, RecordingWorkflow

logger = logging.getLogger(__name__)


def take_id_for(audio: bytes) -> str:
    """Stable identity of a take across Streamlit reruns."""
    return hashlib.sha256(audio).hexdigest()


def render_recorder(workflow: RecordingWorkflow, page: PageState) -> None:
    """Render the audio input and save each new take."""
    audio = st.audio_input(
        "Record a voice note",
        disabled=not workflow.can_start or page.is_saving_recording,
        help="Click the microphone to start, click again to stop and save.",
    )

    if audio is not None:
        take = audio.getvalue()
        try:
            with st.spinner("Saving recording..."):
                saved = workflow.submit(take, take_id_for(take))
        except DeviceUnavailableError as exc:
            logger.warning("Recording unavailable: %s", exc.detail)
            saved = None
        if saved is not None:
            st.rerun()

    if workflow.state is RecordingState.saved:
        st.caption("Recording saved.")
