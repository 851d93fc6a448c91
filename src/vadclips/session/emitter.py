import asyncio
import logging
from typing import Optional

from eventemitter import EventEmitter

from vadclips.session.clip_events import ClipEvent, ClipEventListener

CLIP_EVENT = "clip-event"


class ClipEventSourceMixin:
    """
    Fans ClipEvents out to registered listeners through an EventEmitter.

    The emitter binds to an event loop when created, so it is built on the
    first emit from inside the running loop, and rebuilt if the loop changes.
    Listeners may register before that. EventEmitter delivery is deferred,
    emit_event() yields until the listener coroutines have had a turn.
    """

    def __init__(self) -> None:
        self._listener_callbacks = []
        self._emitter: Optional[EventEmitter] = None
        self._emitter_loop = None
        self._events_logger = logging.getLogger(self.__class__.__name__)

    def add_event_listener(self, e_listener: ClipEventListener) -> None:
        self._listener_callbacks.append(e_listener.on_clip_event)
        # rebuilt with the full listener list on the next emit
        self._emitter = None

    def _get_emitter(self) -> EventEmitter:
        loop = asyncio.get_running_loop()
        if self._emitter is None or self._emitter_loop is not loop:
            self._emitter = EventEmitter(loop=loop)
            self._emitter_loop = loop
            self._emitter.on(EventEmitter.LISTENER_ERROR_EVENT, self._on_listener_error)
            for callback in self._listener_callbacks:
                self._emitter.on(CLIP_EVENT, callback)
        return self._emitter

    async def emit_event(self, event: ClipEvent) -> None:
        self._get_emitter().emit(CLIP_EVENT, event)
        # one turn to dispatch, one for the listener tasks to run
        await asyncio.sleep(0)
        await asyncio.sleep(0)

    def _on_listener_error(self, event, listener, exc):
        self._events_logger.error("Listener %s failed handling %s",
                                  getattr(listener, "__qualname__", listener), event,
                                  exc_info=(type(exc), exc, exc.__traceback__))
