"""Searchable recording list (search matches recording ids)."""

import streamlit as st

from voicenotes.ui.state import PageState, RecordingView
from voicenotes.ui.workflows.chat import ChatWorkflow


def _label(recording: RecordingView) -> str:
    when = recording.timestamp.strftime("%Y-%m-%d %H:%M:%S")
    return f"{recording.id[:8]} · {recording.duration} · {when}"


def render_recording_list(page: PageState, chat: ChatWorkflow) -> None:
    """Render the search box and one selectable row per recording."""
    st.subheader("Recordings")
    page.search_term = st.text_input(
        "Search by id",
        value=page.search_term,
        placeholder="e.g. 3f2a",
    )

    if page.is_loading:
        st.caption("Loading...")
        return

    recordings = page.filtered_recordings()
    if not recordings:
        st.info("No recordings yet." if not page.search_term else "No recordings match.")
        return

    for recording in recordings:
        selected = recording.id == page.selected_id
        if st.button(
            _label(recording),
            key=f"rec-{recording.id}",
            type="primary" if selected else "secondary",
            use_container_width=True,
        ):
            page.select(recording.id)
            chat.load(recording.id)
            st.rerun()
