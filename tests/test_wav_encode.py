"""Tests for the PCM16 WAV container encoder and decoder."""

import struct
import numpy as np
import pytest

from vadclips.errors import ContainerFormatError
from vadclips.session.wav_encode import (
    encode_wav, encode_artifact, decode_wav, float_to_pcm16, HEADER_SIZE,
)


def test_header_layout_is_canonical():
    """Every header field sits at its fixed offset, little endian."""
    data = encode_wav(np.zeros(10, dtype=np.float32), 16000)

    assert len(data) == HEADER_SIZE + 20
    assert data[0:4] == b"RIFF"
    assert struct.unpack_from("<I", data, 4)[0] == 36 + 20
    assert data[8:12] == b"WAVE"
    assert data[12:16] == b"fmt "
    assert struct.unpack_from("<I", data, 16)[0] == 16
    assert struct.unpack_from("<H", data, 20)[0] == 1
    assert struct.unpack_from("<H", data, 22)[0] == 1
    assert struct.unpack_from("<I", data, 24)[0] == 16000
    assert struct.unpack_from("<I", data, 28)[0] == 32000
    assert struct.unpack_from("<H", data, 32)[0] == 2
    assert struct.unpack_from("<H", data, 34)[0] == 16
    assert data[36:40] == b"data"
    assert struct.unpack_from("<I", data, 40)[0] == 20


def test_exact_bytes_for_small_clip():
    """Header and samples match a hand built reference."""
    data = encode_wav([0.0, 1.0, -1.0], 16000)
    expected = (b"RIFF" + struct.pack("<I", 42) + b"WAVE"
                + b"fmt " + struct.pack("<IHHIIHH", 16, 1, 1, 16000, 32000, 2, 16)
                + b"data" + struct.pack("<I", 6)
                + struct.pack("<hhh", 0, 32767, -32768))
    assert data == expected


def test_empty_input_is_header_only():
    data = encode_wav([], 16000)
    assert len(data) == HEADER_SIZE
    assert struct.unpack_from("<I", data, 4)[0] == 36
    assert struct.unpack_from("<I", data, 40)[0] == 0


def test_asymmetric_scale():
    """Negative values scale by 32768, the rest by 32767."""
    pcm = float_to_pcm16([-1.0, -0.5, 0.0, 0.5, 1.0])
    assert pcm.tolist() == [-32768, -16384, 0, 16384, 32767]


def test_out_of_range_values_are_clamped():
    pcm = float_to_pcm16([2.5, -7.0, 1.0000001])
    assert pcm.tolist() == [32767, -32768, 32767]


def test_non_finite_values():
    """NaN encodes as silence, infinities as full scale."""
    pcm = float_to_pcm16([np.nan, np.inf, -np.inf])
    assert pcm.tolist() == [0, 32767, -32768]


def test_round_trip_within_quantization_bound():
    rng = np.random.default_rng(1234)
    samples = rng.uniform(-1.2, 1.2, 5000).astype(np.float32)

    decoded, rate = decode_wav(encode_wav(samples, 16000))

    assert rate == 16000
    assert decoded.shape == (5000,)
    clamped = np.clip(samples, -1.0, 1.0)
    assert np.max(np.abs(decoded - clamped)) <= 1.0 / 32768


def test_artifact_reports_duration():
    artifact = encode_artifact(np.zeros(8000, dtype=np.float32))
    assert artifact.sample_count == 8000
    assert artifact.sample_rate == 16000
    assert artifact.duration_seconds == 0.5
    assert artifact.content_type == "audio/wav"
    assert len(artifact.data) == HEADER_SIZE + 16000


def test_decode_rejects_short_input():
    with pytest.raises(ContainerFormatError, match="at least 44 bytes"):
        decode_wav(b"RIFF")


def test_decode_rejects_wrong_tags():
    data = bytearray(encode_wav([0.1, 0.2]))
    data[8:12] = b"AVI "
    with pytest.raises(ContainerFormatError, match="Not a RIFF/WAVE"):
        decode_wav(bytes(data))


def test_decode_rejects_truncated_data():
    data = encode_wav(np.zeros(100, dtype=np.float32))
    with pytest.raises(ContainerFormatError, match="does not match"):
        decode_wav(data[:-10])


def test_decode_rejects_stereo():
    data = bytearray(encode_wav([0.1, 0.2]))
    struct.pack_into("<H", data, 22, 2)
    with pytest.raises(ContainerFormatError, match="Unsupported format"):
        decode_wav(bytes(data))
