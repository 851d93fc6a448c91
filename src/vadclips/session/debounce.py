import asyncio
import logging
from typing import Awaitable, Callable, Optional

from vadclips.utils.top_error import spawn_task

logger = logging.getLogger("SilenceDebounceTimer")

SILENCE_TIMEOUT = 4.0

ExpireCallback = Callable[[], Awaitable[None]]


class SilenceDebounceTimer:
    """
    Single shot timer that is pushed back every time it is rearmed, so it
    only fires after a quiet period of `duration` seconds. At most one
    expiry is ever pending, arming always cancels the previous one first.

    The timer counts as consumed the moment the delay elapses, before the
    callback runs. A rearm or cancel issued while the callback is still
    awaiting therefore never interrupts it.
    """

    def __init__(self, duration: float = SILENCE_TIMEOUT, on_expire: Optional[ExpireCallback] = None):
        self.duration = duration
        self.on_expire = on_expire
        self.fire_count = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._task is not None

    def arm(self, duration: float, callback: ExpireCallback) -> None:
        self.cancel()
        self._task = spawn_task(self._wait_then_fire, duration, callback)
        logger.debug("Armed for %.3fs", duration)

    def rearm(self) -> None:
        if self.on_expire is None:
            raise RuntimeError("rearm() needs an on_expire callback, use arm() instead")
        self.arm(self.duration, self.on_expire)

    def cancel(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        self._task = None
        logger.debug("Cancelled pending expiry")

    async def _wait_then_fire(self, duration: float, callback: ExpireCallback):
        await asyncio.sleep(duration)
        self._task = None
        self.fire_count += 1
        logger.info("%.3fs of silence, firing", duration)
        await callback()
