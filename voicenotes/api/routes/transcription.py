"""Speech-to-text endpoint: base64 audio in, plain transcript out."""

from fastapi import APIRouter, Depends

from voicenotes.api.dependencies import get_stt
from voicenotes.core.models import TranscribeRequest, TranscriptionResponse
from voicenotes.core.utils import decode_audio_payload
from voicenotes.services.transcription.base import BaseSTT

router = APIRouter(prefix="/transcriptions", tags=["transcription"])


@router.post("", response_model=TranscriptionResponse)
async def transcribe(body: TranscribeRequest, stt: BaseSTT = Depends(get_stt)):
    """Transcribe an audio payload without storing anything."""
    audio = decode_audio_payload(body.audio_base64)
    text = await stt.transcribe_bytes(audio)
    return TranscriptionResponse(text=text)
