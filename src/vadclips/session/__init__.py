"""
vadclips/session/__init__.py
Burst accumulation, silence debounce, merging, WAV encoding and publishing
"""

from vadclips.session.clip_events import (
    SAMPLE_RATE, AudioBurst, EncodedArtifact, PublishedClip,
    ClipEvent, ClipEventListener, ClipPublishedEvent, ClipsReleasedEvent,
    RecordingStartEvent, RecordingStopEvent,
)
from vadclips.session.accumulator import SessionAccumulator, SessionState
from vadclips.session.debounce import SilenceDebounceTimer
from vadclips.session.merge import merge_bursts
from vadclips.session.publisher import ClipPublisher, ClipStore
from vadclips.session.wav_encode import encode_wav, encode_artifact, decode_wav

__all__ = [
    "SAMPLE_RATE", "AudioBurst", "EncodedArtifact", "PublishedClip",
    "ClipEvent", "ClipEventListener", "ClipPublishedEvent", "ClipsReleasedEvent",
    "RecordingStartEvent", "RecordingStopEvent",
    "SessionAccumulator", "SessionState", "SilenceDebounceTimer", "merge_bursts",
    "ClipPublisher", "ClipStore", "encode_wav", "encode_artifact", "decode_wav",
]
