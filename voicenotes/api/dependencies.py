"""FastAPI dependencies handing out the gateways stored on ``app.state``."""

from fastapi import Request

from voicenotes.services.llm.base import BaseChatLLM
from voicenotes.services.storage.object_store import S3ObjectStore
from voicenotes.services.transcription.base import BaseSTT


def get_object_store(request: Request) -> S3ObjectStore:
    return request.app.state.object_store


def get_stt(request: Request) -> BaseSTT:
    return request.app.state.stt


def get_llm(request: Request) -> BaseChatLLM:
    return request.app.state.llm
