"""Group speech detector bursts into silence separated sessions and publish them as WAV clips."""

from vadclips.config import ClipperConfig
from vadclips.errors import VadClipsError, DetectorInitError, ContainerFormatError, ClipRevokedError
from vadclips.recorder import SessionRecorder
from vadclips.session import (
    SAMPLE_RATE, AudioBurst, PublishedClip, ClipPublisher, SessionAccumulator,
    encode_wav, decode_wav, merge_bursts,
)

__all__ = [
    "ClipperConfig", "SessionRecorder",
    "VadClipsError", "DetectorInitError", "ContainerFormatError", "ClipRevokedError",
    "SAMPLE_RATE", "AudioBurst", "PublishedClip", "ClipPublisher", "SessionAccumulator",
    "encode_wav", "decode_wav", "merge_bursts",
]
