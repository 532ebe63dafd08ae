"""Transcription panel and transcript-grounded chat panel."""

import streamlit as st

from voicenotes.ui.state import MessageStatus, PageState
from voicenotes.ui.workflows.chat import ChatWorkflow


def render_transcription_panel(page: PageState) -> None:
    recording = page.selected
    if recording is None:
        return
    st.subheader("Transcription")
    if recording.has_transcription:
        st.write(recording.transcription)
    else:
        st.caption("No transcription yet. Press Transcribe to create one.")


def render_chat_panel(page: PageState, chat: ChatWorkflow) -> None:
    """Render the conversation and the chat input (submitted on Enter)."""
    recording = page.selected
    if recording is None or not recording.has_transcription:
        return

    st.subheader("Chat")
    for message in page.messages:
        with st.chat_message(message.role):
            st.markdown(message.content)
            if message.status is MessageStatus.failed:
                st.caption(":red[Not saved]")
            elif message.status is MessageStatus.pending:
                st.caption("Sending...")

    prompt = st.chat_input(
        "Ask about this recording",
        disabled=page.is_chat_loading,
    )
    if prompt and chat.can_send(prompt):
        with st.spinner("Thinking..."):
            chat.send(prompt)
        st.rerun()
