import asyncio
import logging
from pathlib import Path
from typing import Optional
import numpy as np
import soundfile as sf

from vadclips.detector.detector_api import BurstCallback
from vadclips.session.clip_events import SAMPLE_RATE
from vadclips.utils.top_error import spawn_task

logger = logging.getLogger("FileBurstDetector")


class FileBurstDetector:
    """ Stands in for a real speech detector by cutting a 16 kHz audio file
    into fixed length bursts and delivering them with a pause in between.
    Good for testing and for replaying recordings through the session logic.

    With simulate_timing the pause is gap_seconds of real time, otherwise
    bursts are delivered back to back, only yielding to the loop.
    """

    def __init__(self,
                 path: Path | str,
                 burst_seconds: float = 1.0,
                 gap_seconds: float = 0.5,
                 simulate_timing: bool = True):
        self.path = Path(path)
        self.burst_seconds = burst_seconds
        self.gap_seconds = gap_seconds
        self._simulate_timing = simulate_timing
        self._sound_file: Optional[sf.SoundFile] = None
        self._on_burst: Optional[BurstCallback] = None
        self._reader_task: Optional[asyncio.Task] = None
        self._destroyed = False
        self.bursts_sent = 0
        self.finished = asyncio.Event()

    @property
    def running(self) -> bool:
        return self._reader_task is not None

    async def init(self, on_burst: BurstCallback) -> "FileBurstDetector":
        # might blow up, let it
        sound_file = sf.SoundFile(self.path)
        if sound_file.samplerate != SAMPLE_RATE:
            sound_file.close()
            raise ValueError(f"{self.path} is {sound_file.samplerate} Hz, only {SAMPLE_RATE} Hz is supported")
        self._sound_file = sound_file
        self._on_burst = on_burst
        self.finished.clear()
        logger.info("Opened %s, %d frames, %d channels",
                    self.path, sound_file.frames, sound_file.channels)
        return self

    async def start(self) -> None:
        if self._destroyed:
            raise RuntimeError("Detector has been destroyed")
        if self._sound_file is None:
            raise RuntimeError("Detector not initialized, call init() first")
        if self._reader_task:
            return
        self._reader_task = spawn_task(self._reader)

    async def _reader(self):
        frames_per_burst = max(1, int(round(self.burst_seconds * SAMPLE_RATE)))
        while True:
            data = self._sound_file.read(frames=frames_per_burst, dtype="float32", always_2d=True)
            if data.shape[0] == 0:
                break
            burst = np.ascontiguousarray(data[:, 0])
            self.bursts_sent += 1
            logger.debug("Burst %d, %d samples", self.bursts_sent, burst.shape[0])
            await self._on_burst(burst)
            await asyncio.sleep(self.gap_seconds if self._simulate_timing else 0)
        logger.info("Finished %s after %d bursts", self.path, self.bursts_sent)
        self._reader_task = None
        self.finished.set()

    async def stop(self) -> None:
        if self._reader_task is None:
            logger.debug("Not running, nothing to stop")
            return
        task, self._reader_task = self._reader_task, None
        task.cancel()
        if task is asyncio.current_task():
            # stopped from inside a burst callback
            return
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def destroy(self) -> None:
        await self.stop()
        if self._sound_file is not None:
            self._sound_file.close()
            self._sound_file = None
        self._destroyed = True
        # nothing more will arrive, release anyone waiting for the end
        self.finished.set()
