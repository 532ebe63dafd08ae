"""Shared utility functions for Voice Notes AI."""

import base64
import binascii
import re
import time

from voicenotes.core.exceptions import EmptyPayloadError, InvalidPayloadError

_DATA_URL_PREFIX = re.compile(r"^data:[^,]*;base64,")


def format_duration(elapsed_ms: float) -> str:
    """Format an elapsed time in milliseconds as ``m:ss``.

    Seconds are floored and zero-padded to two digits, e.g. 125000 -> "2:05".
    """
    seconds = max(int(elapsed_ms // 1000), 0)
    minutes, seconds = divmod(seconds, 60)
    return f"{minutes}:{seconds:02d}"


def encode_audio_payload(data: bytes) -> str:
    """Return the base64 text form of raw audio bytes."""
    return base64.b64encode(data).decode("ascii")


def decode_audio_payload(payload: str) -> bytes:
    """Decode a base64 audio payload, tolerating a ``data:...;base64,`` prefix.

    Raises:
        EmptyPayloadError: If the payload (or its decoded bytes) is empty.
        InvalidPayloadError: If the payload is not valid base64.
    """
    payload = _DATA_URL_PREFIX.sub("", (payload or "").strip())
    if not payload:
        raise EmptyPayloadError("audio payload")
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidPayloadError(f"Audio payload is not valid base64: {exc}") from exc
    if not data:
        raise EmptyPayloadError("audio payload")
    return data


def generate_audio_key(now_ms: int | None = None) -> str:
    """Storage key for a new recording: ``recording_<epoch-ms>.wav``."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"recording_{now_ms}.wav"
