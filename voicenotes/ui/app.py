"""
Voice Notes AI Streamlit UI: single-page entry point.

Run with: ``streamlit run voicenotes/ui/app.py``
"""

import streamlit as st

from voicenotes.core.config import configure_logging, get_settings
from voicenotes.ui.api_client import get_api_client
from voicenotes.ui.components.chat_panel import render_chat_panel, render_transcription_panel
from voicenotes.ui.components.player import render_player
from voicenotes.ui.components.recorder import render_recorder
from voicenotes.ui.components.recording_list import render_recording_list
from voicenotes.ui.state import PageState
from voicenotes.ui.workflows.chat import ChatWorkflow
from voicenotes.ui.workflows.library import load_recordings
from voicenotes.ui.workflows.recording import RecordingWorkflow
from voicenotes.ui.workflows.transcription import TranscriptionStep

# ---------------------------------------------------------------------------
# Page config (must be first Streamlit call)
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="Voice Notes AI",
    page_icon="\U0001f399️",
    layout="wide",
)

settings = get_settings()
configure_logging(settings.log_level)


# ---------------------------------------------------------------------------
# Session state defaults
# ---------------------------------------------------------------------------
if "api_base_url" not in st.session_state:
    st.session_state.api_base_url = settings.api_base_url
if "page" not in st.session_state:
    st.session_state.page = PageState(url_lifetime=float(settings.signed_url_expiry))

page: PageState = st.session_state.page

# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------
with st.sidebar:
    st.title("\U0001f399️ Voice Notes AI")
    st.caption("Record, transcribe, and chat about your voice notes")
    st.divider()
    st.session_state.api_base_url = st.text_input(
        "Backend API URL",
        value=st.session_state.api_base_url,
        help="URL of the Voice Notes AI FastAPI backend server",
    )

    api = get_api_client(st.session_state.api_base_url)
    _conn_ok, _conn_msg = api.check_connection()
    if _conn_ok:
        st.success(f"Backend: {_conn_msg}")
    else:
        st.error(f"Backend: {_conn_msg}")

    if st.button("Refresh recordings", use_container_width=True):
        load_recordings(page, api)
        st.rerun()

if "recorder" not in st.session_state:
    st.session_state.recorder = RecordingWorkflow(page, api)
recorder: RecordingWorkflow = st.session_state.recorder
transcription_step = TranscriptionStep(page, api)
chat = ChatWorkflow(page, api)

if not st.session_state.get("recordings_loaded"):
    load_recordings(page, api)
    st.session_state.recordings_loaded = True

# ---------------------------------------------------------------------------
# Page
# ---------------------------------------------------------------------------
st.header("Voice Notes")

if page.error:
    col_msg, col_dismiss = st.columns([6, 1])
    with col_msg:
        st.error(page.error)
    with col_dismiss:
        if st.button("Dismiss"):
            page.clear_error()
            st.rerun()

render_recorder(recorder, page)
st.divider()

col_list, col_detail = st.columns([1, 2])
with col_list:
    render_recording_list(page, chat)
with col_detail:
    render_player(page, api, transcription_step)
    render_transcription_panel(page)
    render_chat_panel(page, chat)
