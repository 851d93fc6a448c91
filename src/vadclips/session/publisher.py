import logging
import uuid
from typing import Iterator, Optional

from vadclips.errors import ClipRevokedError
from vadclips.session.clip_events import (
    ClipPublishedEvent, ClipsReleasedEvent,
    EncodedArtifact, PublishedClip, WAV_CONTENT_TYPE,
)
from vadclips.session.emitter import ClipEventSourceMixin

logger = logging.getLogger("ClipPublisher")

DEFAULT_HANDLE_PREFIX = "blob:vadclips"


class ClipStore:
    """
    In memory registry mapping URL like handles to encoded clip bytes.
    Revoking drops the bytes; revoking the same handle again is a no-op.
    """

    def __init__(self, prefix: str = DEFAULT_HANDLE_PREFIX):
        self.prefix = prefix
        self._objects: dict[str, tuple[bytes, str]] = {}
        self.revoked_count = 0

    def create(self, data: bytes, content_type: str = WAV_CONTENT_TYPE) -> str:
        handle = f"{self.prefix}/{uuid.uuid4()}"
        self._objects[handle] = (bytes(data), content_type)
        return handle

    def resolve(self, handle: str) -> bytes:
        try:
            return self._objects[handle][0]
        except KeyError:
            raise ClipRevokedError(handle) from None

    def content_type(self, handle: str) -> str:
        try:
            return self._objects[handle][1]
        except KeyError:
            raise ClipRevokedError(handle) from None

    def revoke(self, handle: str) -> bool:
        if self._objects.pop(handle, None) is None:
            return False
        self.revoked_count += 1
        return True

    def __contains__(self, handle) -> bool:
        return handle in self._objects

    def __len__(self) -> int:
        return len(self._objects)


class ClipPublisher(ClipEventSourceMixin):
    """
    Owns the ordered list of published clips and the handles behind them.

    The list only grows while recording; teardown() is the one place that
    releases handles and empties it. Readers get a tuple snapshot through
    `clips`, or subscribe with add_event_listener() to hear about new ones.
    """

    def __init__(self, store: Optional[ClipStore] = None):
        self.store = store if store is not None else ClipStore()
        super().__init__()
        self._clips: list[PublishedClip] = []
        self._sequence = 0

    @property
    def clips(self) -> tuple[PublishedClip, ...]:
        return tuple(self._clips)

    def __len__(self) -> int:
        return len(self._clips)

    def __iter__(self) -> Iterator[PublishedClip]:
        return iter(self.clips)

    async def publish(self, artifact: EncodedArtifact) -> PublishedClip:
        handle = self.store.create(artifact.data, artifact.content_type)
        self._sequence += 1
        clip = PublishedClip(handle=handle,
                             duration_seconds=artifact.duration_seconds,
                             sample_count=artifact.sample_count,
                             sequence=self._sequence)
        self._clips.append(clip)
        logger.info("Published session %d: %.3f seconds, %d bytes, %s",
                    clip.sequence, clip.duration_seconds, len(artifact.data), handle)
        await self.emit_event(ClipPublishedEvent(clip=clip))
        return clip

    def resolve(self, clip: PublishedClip | str) -> bytes:
        handle = clip.handle if isinstance(clip, PublishedClip) else clip
        return self.store.resolve(handle)

    async def teardown(self) -> int:
        if not self._clips:
            return 0
        released = []
        for clip in self._clips:
            if self.store.revoke(clip.handle):
                released.append(clip.handle)
        self._clips = []
        logger.info("Released %d clip handles", len(released))
        await self.emit_event(ClipsReleasedEvent(handles=released))
        return len(released)
