"""
Float32 samples to canonical RIFF/WAVE bytes (PCM16, mono) and back.

Layout, all little endian:

    0   "RIFF"      4   36 + data bytes   8  "WAVE"
    12  "fmt "      16  16                20 format 1 (PCM)
    22  channels 1  24  sample rate       28 byte rate (rate * 2)
    32  align 2     34  16 bits           36 "data"
    40  data bytes  44  int16 samples
"""
import struct
import numpy as np

from vadclips.errors import ContainerFormatError
from vadclips.session.clip_events import SAMPLE_RATE, EncodedArtifact

HEADER_SIZE = 44
_HEADER = struct.Struct('<4sI4s4sIHHIIHH4sI')
PCM_FORMAT = 1
CHANNELS = 1
BITS_PER_SAMPLE = 16
BLOCK_ALIGN = CHANNELS * BITS_PER_SAMPLE // 8


def float_to_pcm16(samples) -> np.ndarray:
    """
    Quantize to int16. NaN becomes silence and infinities full scale, then
    the value is clamped to [-1, 1] and scaled by 32768 below zero and 32767
    otherwise so both ends stay representable.
    """
    data = np.asarray(samples, dtype=np.float64).reshape(-1)
    data = np.nan_to_num(data, nan=0.0, posinf=1.0, neginf=-1.0)
    data = np.clip(data, -1.0, 1.0)
    scaled = np.where(data < 0, data * 32768.0, data * 32767.0)
    return np.rint(scaled).astype('<i2')


def pcm16_to_float(pcm: np.ndarray) -> np.ndarray:
    values = np.asarray(pcm, dtype=np.int16).astype(np.float32)
    return np.where(values < 0, values / 32768.0, values / 32767.0).astype(np.float32)


def wav_header(sample_count: int, sample_rate: int = SAMPLE_RATE) -> bytes:
    data_bytes = sample_count * BLOCK_ALIGN
    return _HEADER.pack(b'RIFF', 36 + data_bytes, b'WAVE',
                        b'fmt ', 16, PCM_FORMAT, CHANNELS,
                        sample_rate, sample_rate * BLOCK_ALIGN, BLOCK_ALIGN, BITS_PER_SAMPLE,
                        b'data', data_bytes)


def encode_wav(samples, sample_rate: int = SAMPLE_RATE) -> bytes:
    pcm = float_to_pcm16(samples)
    return wav_header(pcm.shape[0], sample_rate) + pcm.tobytes()


def encode_artifact(samples) -> EncodedArtifact:
    pcm = float_to_pcm16(samples)
    data = wav_header(pcm.shape[0], SAMPLE_RATE) + pcm.tobytes()
    return EncodedArtifact(data=data, sample_count=int(pcm.shape[0]), sample_rate=SAMPLE_RATE)


def decode_wav(data: bytes) -> tuple[np.ndarray, int]:
    """
    Parse bytes produced by encode_wav, returning (float32 samples, sample rate).
    Only the canonical 44 byte header layout is accepted.
    """
    if len(data) < HEADER_SIZE:
        raise ContainerFormatError(f"Need at least {HEADER_SIZE} bytes, got {len(data)}")
    (riff, chunk_size, wave, fmt_id, fmt_size, audio_format, channels,
     sample_rate, byte_rate, block_align, bits, data_id, data_bytes) = _HEADER.unpack_from(data)
    if riff != b'RIFF' or wave != b'WAVE':
        raise ContainerFormatError("Not a RIFF/WAVE container")
    if fmt_id != b'fmt ' or fmt_size != 16 or data_id != b'data':
        raise ContainerFormatError("Unexpected chunk layout")
    if audio_format != PCM_FORMAT or channels != CHANNELS or bits != BITS_PER_SAMPLE:
        raise ContainerFormatError(
            f"Unsupported format {audio_format}, {channels} channels, {bits} bits")
    if block_align != BLOCK_ALIGN or byte_rate != sample_rate * BLOCK_ALIGN:
        raise ContainerFormatError("Inconsistent byte rate or block align")
    if chunk_size != 36 + data_bytes or len(data) - HEADER_SIZE < data_bytes or data_bytes % BLOCK_ALIGN:
        raise ContainerFormatError(f"Data size {data_bytes} does not match container")
    pcm = np.frombuffer(data, dtype='<i2', count=data_bytes // BLOCK_ALIGN, offset=HEADER_SIZE)
    return pcm16_to_float(pcm), sample_rate
