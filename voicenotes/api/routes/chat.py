"""Chat endpoint answering questions grounded in a transcript."""

import logging

from fastapi import APIRouter, Depends

from voicenotes.api.dependencies import get_llm
from voicenotes.core.models import ChatReply, ChatRequest
from voicenotes.services.llm.base import BaseChatLLM

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("", response_model=ChatReply)
async def chat(body: ChatRequest, llm: BaseChatLLM = Depends(get_llm)):
    """Send the conversation plus its transcript to the chat model.

    The model sees a system instruction naming the transcript, followed by
    the turns in order; the last turn is the user's new message.
    """
    history = [{"role": turn.role.value, "content": turn.content} for turn in body.messages]
    content = await llm.chat(history, body.transcription)
    logger.info("Chat reply generated (%d turns in, %d chars out)", len(history), len(content))
    return ChatReply(content=content)
