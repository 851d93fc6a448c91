from typing import Any, Awaitable, Callable, Protocol
import numpy as np

BurstCallback = Callable[[np.ndarray], Awaitable[None]]


class SpeechDetector(Protocol):
    """
    Fixed capability surface every detector adapter provides. Whatever the
    underlying library calls pause/stop/close is normalized here once, so
    callers never probe for methods.

    init() registers the coroutine that receives one float32 burst per
    speech end event. stop() must be harmless when not started; destroy()
    releases the detector for good.
    """

    async def init(self, on_burst: BurstCallback) -> Any: ...

    async def start(self) -> None: ...

    async def stop(self) -> None: ...

    async def destroy(self) -> None: ...
