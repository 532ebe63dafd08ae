"""Playback + waveform panel for the selected recording."""

import logging

import numpy as np
import streamlit as st

from voicenotes.core.exceptions import VoiceNotesError
from voicenotes.ui.api_client import APIClient
from voicenotes.ui.state import PageState, RecordingView
from voicenotes.ui.waveform import compute_peaks
from voicenotes.ui.workflows.library import current_audio_url, refresh_audio_url
from voicenotes.ui.workflows.transcription import TranscriptionStep

logger = logging.getLogger(__name__)


@st.cache_data(show_spinner=False, max_entries=32)
def _remote_peaks(recording_id: str, _api: APIClient, _url: str) -> np.ndarray:
    """Waveform of stored audio, cached per recording (signed URLs rotate)."""
    return compute_peaks(_api.fetch_audio(_url))


def _peaks(
    page: PageState, api: APIClient, recording: RecordingView, url: str
) -> np.ndarray | None:
    try:
        if page.blobs.is_local(url):
            blob = page.blobs.resolve(url)
            return compute_peaks(blob.data) if blob else None
        return _remote_peaks(recording.id, api, url)
    except VoiceNotesError as exc:
        logger.warning("Waveform unavailable for %s: %s", recording.id, exc.detail)
        return None


def render_player(page: PageState, api: APIClient, step: TranscriptionStep) -> None:
    """Render audio playback, the waveform, and the Transcribe trigger."""
    recording = page.selected
    if recording is None:
        st.info("Select a recording to play it back.")
        return

    st.subheader(f"Recording {recording.id[:8]}")
    st.caption(f"{recording.duration} · {recording.timestamp:%Y-%m-%d %H:%M:%S}")

    url = current_audio_url(page, api, recording)
    if url is None:
        st.warning("Audio link is not available yet. Retry in a moment.")
        if st.button("Retry audio link"):
            refresh_audio_url(page, api, recording.id)
            st.rerun()
    elif page.blobs.is_local(url):
        blob = page.blobs.resolve(url)
        if blob is not None:
            st.audio(blob.data, format=blob.mime)
    else:
        st.audio(url)

    if url is not None:
        peaks = _peaks(page, api, recording, url)
        if peaks is not None:
            st.area_chart(peaks, height=120)

    if st.button(
        "Transcribing..." if page.is_transcribing else "Transcribe",
        disabled=page.is_transcribing,
    ):
        with st.spinner("Transcribing audio..."):
            step.run(recording.id)
        st.rerun()
