from typing import ClassVar, Protocol
from enum import Enum
import time
import uuid
from dataclasses import dataclass, field
import numpy as np

SAMPLE_RATE = 16000
WAV_CONTENT_TYPE = "audio/wav"


@dataclass(frozen=True, kw_only=True, eq=False)
class AudioBurst:
    samples: np.ndarray = field(repr=False)  # float32, shape (samples,), read only
    timestamp: float = field(default_factory=time.time)
    burst_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self):
        """
        Copy the samples into an immutable mono float32 array the caller
        cannot reach. Accepts anything numpy can turn into an array; a (n, 1)
        column is flattened, wider 2-D data is rejected.
        """
        data = np.array(self.samples, dtype=np.float32)
        if data.ndim == 2 and data.shape[1] == 1:
            data = data[:, 0].copy()
        elif data.ndim == 0:
            data = data.reshape(1)
        if data.ndim != 1:
            raise ValueError(f"Burst must be mono, got shape {data.shape}")
        data.flags.writeable = False
        object.__setattr__(self, "samples", data)

    @classmethod
    def from_samples(cls, samples, **kwargs) -> "AudioBurst":
        return cls(samples=samples, **kwargs)

    def __len__(self) -> int:
        return int(self.samples.shape[0])

    @property
    def duration(self) -> float:
        return len(self) / SAMPLE_RATE


@dataclass(frozen=True, kw_only=True)
class EncodedArtifact:
    data: bytes = field(repr=False)
    sample_count: int
    sample_rate: int = SAMPLE_RATE
    content_type: str = WAV_CONTENT_TYPE

    @property
    def duration_seconds(self) -> float:
        return self.sample_count / self.sample_rate


@dataclass(frozen=True, kw_only=True)
class PublishedClip:
    handle: str
    duration_seconds: float
    sample_count: int
    sequence: int                         # 1 based, order of publication
    created: float = field(default_factory=time.time)


class ClipEventType(str, Enum):
    recording_start = "RECORDING_START"
    recording_stop = "RECORDING_STOP"
    clip_published = "CLIP_PUBLISHED"
    clips_released = "CLIPS_RELEASED"


@dataclass(kw_only=True)
class ClipEvent:
    event_type: ClipEventType
    timestamp: float = field(default_factory=time.time)
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))


@dataclass(kw_only=True)
class RecordingStartEvent(ClipEvent):
    event_type: ClassVar[ClipEventType] = ClipEventType.recording_start


@dataclass(kw_only=True)
class RecordingStopEvent(ClipEvent):
    event_type: ClassVar[ClipEventType] = ClipEventType.recording_stop
    published: bool = False               # residual audio went out as a clip


@dataclass(kw_only=True)
class ClipPublishedEvent(ClipEvent):
    event_type: ClassVar[ClipEventType] = ClipEventType.clip_published
    clip: PublishedClip


@dataclass(kw_only=True)
class ClipsReleasedEvent(ClipEvent):
    event_type: ClassVar[ClipEventType] = ClipEventType.clips_released
    handles: list[str] = field(default_factory=list)


class ClipEventListener(Protocol):

    async def on_clip_event(self, event: ClipEvent) -> None: ...
