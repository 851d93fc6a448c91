import logging
from enum import Enum
from typing import Optional

from vadclips.session.clip_events import (
    SAMPLE_RATE, AudioBurst, PublishedClip,
    RecordingStartEvent, RecordingStopEvent,
)
from vadclips.session.debounce import SILENCE_TIMEOUT, SilenceDebounceTimer
from vadclips.session.emitter import ClipEventSourceMixin
from vadclips.session.merge import merge_bursts
from vadclips.session.publisher import ClipPublisher
from vadclips.session.wav_encode import encode_artifact

logger = logging.getLogger("SessionAccumulator")


class SessionState(Enum):
    STOPPED = "stopped"                  # initial, bursts are dropped
    ACTIVE = "active"                    # recording, nothing accumulated
    ACTIVE_PENDING = "active_pending"    # recording, bursts waiting for silence


class SessionAccumulator(ClipEventSourceMixin):
    """
    Collects speech bursts into a recording session and closes the session
    after `silence_timeout` seconds without a new burst, or on stop().

    State Machine:
        STOPPED --start()--> ACTIVE
        ACTIVE --burst--> ACTIVE_PENDING (timer armed)
        ACTIVE_PENDING --burst--> ACTIVE_PENDING (timer rearmed)
        ACTIVE_PENDING --silence--> ACTIVE (session published)
        ACTIVE, ACTIVE_PENDING --stop()--> STOPPED (residual published)

    Closing a session merges the bursts, encodes them as WAV and hands the
    artifact to the ClipPublisher. A session with no bursts publishes nothing.
    """

    def __init__(self, publisher: ClipPublisher, silence_timeout: float = SILENCE_TIMEOUT):
        self.publisher = publisher
        self.timer = SilenceDebounceTimer(silence_timeout, self.close_session)
        super().__init__()
        self._bursts: list[AudioBurst] = []
        self._active = False
        self._state = SessionState.STOPPED

    @property
    def active(self) -> bool:
        return self._active

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def burst_count(self) -> int:
        return len(self._bursts)

    @property
    def pending_sample_count(self) -> int:
        return sum(len(b) for b in self._bursts)

    @property
    def pending_duration(self) -> float:
        return self.pending_sample_count / SAMPLE_RATE

    async def start(self) -> None:
        self.timer.cancel()
        if self._bursts:
            logger.info("Discarding %d bursts left from previous session", len(self._bursts))
        self._bursts = []
        self._active = True
        self._state = SessionState.ACTIVE
        logger.info("Recording started, new session beginning")
        await self.emit_event(RecordingStartEvent())

    async def on_burst(self, burst: AudioBurst) -> int:
        if not isinstance(burst, AudioBurst):
            burst = AudioBurst.from_samples(burst)
        if not self._active:
            logger.debug("Not recording, dropping burst of %d samples", len(burst))
            return 0
        self._bursts.append(burst)
        self.timer.rearm()
        self._state = SessionState.ACTIVE_PENDING
        logger.debug("Added burst of %d samples, session has %d bursts", len(burst), len(self._bursts))
        return len(self._bursts)

    def flush(self) -> list[AudioBurst]:
        bursts, self._bursts = self._bursts, []
        return bursts

    async def close_session(self) -> Optional[PublishedClip]:
        bursts = self.flush()
        if self._active:
            self._state = SessionState.ACTIVE
        if not bursts:
            logger.debug("No audio to send for current session")
            return None
        merged = merge_bursts(bursts)
        artifact = encode_artifact(merged)
        logger.info("Closing session: %d bursts, %d samples", len(bursts), artifact.sample_count)
        return await self.publisher.publish(artifact)

    async def stop(self) -> Optional[PublishedClip]:
        if not self._active:
            logger.info("Already stopped")
            return None
        self.timer.cancel()
        self._active = False
        self._state = SessionState.STOPPED
        clip = await self.close_session()
        logger.info("Recording stopped")
        await self.emit_event(RecordingStopEvent(published=clip is not None))
        return clip

    async def shutdown(self) -> None:
        self.timer.cancel()
        dropped = self.flush()
        if dropped:
            logger.warning("Shutdown discarded %d unpublished bursts", len(dropped))
        self._active = False
        self._state = SessionState.STOPPED
