"""Decoding helpers for audio takes: length and waveform peak envelope."""

import io

import numpy as np
import soundfile as sf

from voicenotes.core.exceptions import EmptyPayloadError, InvalidPayloadError

_DECODE_ERRORS = (sf.LibsndfileError, RuntimeError, TypeError)


def take_duration_ms(audio_bytes: bytes) -> int:
    """Length of an encoded take in milliseconds, from its frame count.

    Raises:
        EmptyPayloadError: If *audio_bytes* is empty.
        InvalidPayloadError: If the bytes are not a readable audio file.
    """
    if not audio_bytes:
        raise EmptyPayloadError("audio data")
    try:
        info = sf.info(io.BytesIO(audio_bytes))
    except _DECODE_ERRORS as exc:
        raise InvalidPayloadError(f"Audio could not be decoded: {exc}") from exc
    if info.samplerate <= 0:
        raise InvalidPayloadError("Audio has no sample rate")
    return info.frames * 1000 // info.samplerate


def compute_peaks(audio_bytes: bytes, bins: int = 200) -> np.ndarray:
    """Return up to *bins* absolute peak values in ``[0, 1]``.

    Channels are mixed down to mono before the signal is split into
    near-equal chunks.

    Raises:
        EmptyPayloadError: If *audio_bytes* is empty.
        InvalidPayloadError: If the bytes are not a readable audio file.
    """
    if not audio_bytes:
        raise EmptyPayloadError("audio data")
    if bins < 1:
        raise ValueError("bins must be positive")

    try:
        data, _ = sf.read(io.BytesIO(audio_bytes), dtype="float32", always_2d=True)
    except _DECODE_ERRORS as exc:
        raise InvalidPayloadError(f"Audio could not be decoded: {exc}") from exc

    mono = np.abs(data.mean(axis=1))
    if mono.size == 0:
        return np.zeros(bins, dtype=np.float32)

    chunks = np.array_split(mono, min(bins, mono.size))
    return np.clip(np.array([c.max() for c in chunks], dtype=np.float32), 0.0, 1.0)
