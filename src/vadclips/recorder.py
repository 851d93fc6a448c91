"""
vadclips/recorder.py
Wires a speech detector to the session accumulator and clip publisher.

Handles:
- Detector initialization (failure is fatal)
- Start/stop of a recording with best effort detector control
- Teardown that cancels the silence timer before releasing clip handles
"""
import logging
import traceback
from typing import Optional
import numpy as np

from vadclips.config import ClipperConfig
from vadclips.detector.detector_api import SpeechDetector
from vadclips.errors import DetectorInitError
from vadclips.session.accumulator import SessionAccumulator, SessionState
from vadclips.session.clip_events import AudioBurst, ClipEventListener, PublishedClip
from vadclips.session.publisher import ClipPublisher, ClipStore

logger = logging.getLogger("SessionRecorder")


class SessionRecorder:
    """
    Usage:
        recorder = SessionRecorder(detector, ClipperConfig.defaults())
        await recorder.init()
        await recorder.start()
        # ... bursts arrive, clips appear in recorder.clips ...
        await recorder.stop()
        await recorder.teardown()
    """

    def __init__(self,
                 detector: SpeechDetector,
                 config: Optional[ClipperConfig] = None,
                 publisher: Optional[ClipPublisher] = None):
        self.config = config if config is not None else ClipperConfig.defaults()
        self.config.validate()
        self.detector = detector
        self.publisher = publisher if publisher is not None else ClipPublisher(
            ClipStore(self.config.handle_prefix))
        self.accumulator = SessionAccumulator(self.publisher, self.config.silence_timeout)
        self._initialized = False
        self._torn_down = False

    @property
    def clips(self) -> tuple[PublishedClip, ...]:
        return self.publisher.clips

    @property
    def state(self) -> SessionState:
        return self.accumulator.state

    @property
    def is_recording(self) -> bool:
        return self.accumulator.active

    def add_event_listener(self, e_listener: ClipEventListener) -> None:
        self.accumulator.add_event_listener(e_listener)
        self.publisher.add_event_listener(e_listener)

    async def init(self) -> None:
        try:
            await self.detector.init(self.on_detector_burst)
        except Exception as e:
            logger.error("Speech detector failed to initialize\n%s", traceback.format_exc())
            raise DetectorInitError(f"Speech detector failed to initialize: {e}",
                                    original_exception=e) from e
        self._initialized = True
        self._torn_down = False

    async def on_detector_burst(self, samples: np.ndarray) -> None:
        burst = AudioBurst.from_samples(samples)
        logger.debug("Speech ended, audio length %d", len(burst))
        await self.accumulator.on_burst(burst)

    async def start(self) -> None:
        if not self._initialized:
            raise RuntimeError("Recorder not initialized, call init() first")
        await self.accumulator.start()
        await self.detector.start()

    async def stop(self) -> Optional[PublishedClip]:
        if not self.accumulator.active:
            logger.info("Already stopped")
            return None
        clip = await self.accumulator.stop()
        await self._detector_call(self.detector.stop, "stop")
        return clip

    async def teardown(self) -> None:
        if self._torn_down:
            return
        self._torn_down = True
        await self.accumulator.shutdown()
        if self._initialized:
            await self._detector_call(self.detector.stop, "stop")
            await self._detector_call(self.detector.destroy, "destroy")
            self._initialized = False
        await self.publisher.teardown()

    async def _detector_call(self, method, name: str) -> bool:
        try:
            await method()
        except Exception:
            logger.error("Error calling detector %s\n%s", name, traceback.format_exc())
            return False
        return True

    async def __aenter__(self) -> "SessionRecorder":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.teardown()

    async def shutdown(self, message: str = None):
        """Clean shutdown hook for TopErrorHandler."""
        logger.warning("Shutting down recorder: %s", message)
        await self.teardown()
