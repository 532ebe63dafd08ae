"""
Transcript-grounded chat with optimistic updates.

The user's message is shown at once under a temporary id, swapped for the
persisted copy when the save returns, and only then sent to the chat
model.  A message that could not be saved stays visible marked
``failed`` and no reply is requested for it.
"""

import logging
import uuid
from collections.abc import Callable
from datetime import UTC, datetime

from voicenotes.ui.api_client import APIClient, APIError
from voicenotes.ui.state import ChatMessageView, MessageStatus, PageState

logger = logging.getLogger(__name__)


def _temporary_id() -> str:
    return f"temp-{uuid.uuid4().hex}"


class ChatWorkflow:
    """Send and load chat messages for the selected recording.

    Args:
        page: Page state holding the conversation.
        api: Backend client.
        clock: Returns the timestamp for new messages of either role.
        id_factory: Returns temporary ids for optimistic messages.
    """

    def __init__(
        self,
        page: PageState,
        api: APIClient,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
        id_factory: Callable[[], str] = _temporary_id,
    ) -> None:
        self._page = page
        self._api = api
        self._clock = clock
        self._id_factory = id_factory

    def can_send(self, text: str | None) -> bool:
        recording = self._page.selected
        return (
            not self._page.is_chat_loading
            and recording is not None
            and recording.has_transcription
            and bool(text and text.strip())
        )

    def load(self, recording_id: str) -> list[ChatMessageView]:
        """Replace the displayed conversation with the stored history."""
        try:
            data = self._api.list_messages(recording_id)
        except APIError as exc:
            logger.error("Failed to load chat history for %s: %s", recording_id, exc.message)
            self._page.set_error(f"Failed to load chat history: {exc.message}")
            return self._page.messages
        self._page.messages = [ChatMessageView.from_api(m) for m in data]
        return self._page.messages

    def send(self, text: str) -> ChatMessageView | None:
        """Send one user message and return the assistant's reply, if any."""
        if not self.can_send(text):
            return None

        page = self._page
        recording = page.selected
        content = text.strip()

        page.is_chat_loading = True
        try:
            pending = ChatMessageView(
                id=self._id_factory(),
                role="user",
                content=content,
                timestamp=self._clock(),
                status=MessageStatus.pending,
            )
            page.messages.append(pending)

            try:
                saved = self._api.create_message(
                    recording.id, "user", content, pending.timestamp
                )
            except APIError as exc:
                logger.error("Failed to save chat message: %s", exc.message)
                pending.status = MessageStatus.failed
                page.set_error(f"Failed to send message: {exc.message}")
                return None
            page.replace_message(pending.id, ChatMessageView.from_api(saved))

            history = [
                {"role": m.role, "content": m.content}
                for m in page.messages
                if m.status is MessageStatus.saved
            ]
            try:
                reply = self._api.chat(history, recording.transcription)
            except APIError as exc:
                logger.error("Chat request failed: %s", exc.message)
                page.set_error(f"Failed to get a reply: {exc.message}")
                return None

            replied_at = self._clock()
            try:
                stored = self._api.create_message(recording.id, "assistant", reply, replied_at)
            except APIError as exc:
                logger.error("Failed to save assistant reply: %s", exc.message)
                page.set_error(f"Failed to save reply: {exc.message}")
                unsaved = ChatMessageView(
                    id=self._id_factory(),
                    role="assistant",
                    content=reply,
                    timestamp=replied_at,
                    status=MessageStatus.failed,
                )
                page.messages.append(unsaved)
                return unsaved

            message = ChatMessageView.from_api(stored)
            page.messages.append(message)
            return message
        finally:
            page.is_chat_loading = False
