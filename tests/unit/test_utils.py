"""Tests for duration formatting, audio payload encoding, and key generation."""

import base64
import re

import pytest

from voicenotes.core.exceptions import EmptyPayloadError, InvalidPayloadError
from voicenotes.core.utils import (
    decode_audio_payload,
    encode_audio_payload,
    format_duration,
    generate_audio_key,
)


class TestFormatDuration:
    @pytest.mark.parametrize(
        ("elapsed_ms", "expected"),
        [
            (125000, "2:05"),
            (65000, "1:05"),
            (0, "0:00"),
            (999, "0:00"),
            (59999, "0:59"),
            (60000, "1:00"),
            (3_600_000, "60:00"),
        ],
    )
    def test_minutes_and_padded_seconds(self, elapsed_ms, expected):
        assert format_duration(elapsed_ms) == expected

    def test_negative_elapsed_clamps_to_zero(self):
        assert format_duration(-500) == "0:00"

    def test_seconds_always_two_digits(self):
        for ms in range(0, 600_000, 7_001):
            assert re.fullmatch(r"\d+:\d{2}", format_duration(ms))


class TestAudioPayload:
    def test_encode_is_plain_base64(self):
        assert encode_audio_payload(b"RIFF") == base64.b64encode(b"RIFF").decode()

    def test_decode_plain(self):
        assert decode_audio_payload(encode_audio_payload(b"\x00\x01audio")) == b"\x00\x01audio"

    def test_decode_strips_data_url_prefix(self):
        payload = "data:audio/wav;base64," + encode_audio_payload(b"wav-bytes")
        assert decode_audio_payload(payload) == b"wav-bytes"

    @pytest.mark.parametrize("payload", ["", "   ", "data:audio/wav;base64,"])
    def test_decode_empty_raises(self, payload):
        with pytest.raises(EmptyPayloadError):
            decode_audio_payload(payload)

    def test_decode_garbage_raises(self):
        with pytest.raises(InvalidPayloadError):
            decode_audio_payload("not base64 at all!!")


class TestGenerateAudioKey:
    def test_uses_given_epoch_ms(self):
        assert generate_audio_key(1700000000123) == "recording_1700000000123.wav"

    def test_default_uses_current_time(self):
        assert re.fullmatch(r"recording_\d{13}\.wav", generate_audio_key())
