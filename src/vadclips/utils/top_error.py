import asyncio
import contextvars
import functools
import logging
import traceback
from typing import Optional, Protocol

# Key for finding the handler installed by TopErrorHandler.run()
ERROR_HANDLER = contextvars.ContextVar('ERROR_HANDLER')

logger = logging.getLogger("TopErrorHandler")


class TopLevelCallback(Protocol): # pragma: no cover

    async def on_error(self, error_dict: dict):
        pass


class CleanShutdown(Protocol): # pragma: no cover

    async def shutdown(self, message: str = None):
        pass


class TopErrorHandler:
    """
    Catches exceptions from background tasks (timer expiry, detector
    feeds) that nobody awaits, and turns them into a log entry plus an
    optional callback and shutdown hook.

    Usage:
        handler = TopErrorHandler(top_level_callback=ui, clean_shutdown=recorder)
        handler.run(main)
    """

    def __init__(self,
                 top_level_callback: Optional[TopLevelCallback] = None,
                 clean_shutdown: Optional[CleanShutdown] = None,
                 logger: Optional[logging.Logger] = None):
        self.top_level_callback = top_level_callback
        self.clean_shutdown = clean_shutdown
        self.logger = logger if logger is not None else logging.getLogger("TopErrorHandler")
        self.error_dicts: list[dict] = []

    async def handle_error(self, task: asyncio.Task, exc: BaseException):
        trace_string = "".join(traceback.format_exception(exc))
        error_dict = dict(exception=exc, trace_string=trace_string, task=task)
        self.error_dicts.append(error_dict)
        self.logger.error("Task %s raised exception\n%s", task.get_name(), trace_string)
        if self.top_level_callback:
            try:
                await self.top_level_callback.on_error(error_dict)
            except Exception:
                self.logger.error("Top level error callback raised exception\n%s",
                                  traceback.format_exc())
        if self.clean_shutdown:
            try:
                await self.clean_shutdown.shutdown(f"On error {exc}")
            except Exception:
                self.logger.error("Clean shutdown raised exception\n%s",
                                  traceback.format_exc())

    def run(self, main_coro, *args, **kwargs):
        token = ERROR_HANDLER.set(self)
        try:
            return asyncio.run(main_coro(*args, **kwargs))
        finally:
            ERROR_HANDLER.reset(token)

    async def async_run(self, main_coro, *args, **kwargs):
        token = ERROR_HANDLER.set(self)
        try:
            return await main_coro(*args, **kwargs)
        finally:
            ERROR_HANDLER.reset(token)

    def wrap_task(self, coro, *args, **kwargs) -> asyncio.Task:
        """Start coro as a task whose failure is routed to handle_error."""
        task = asyncio.create_task(coro(*args, **kwargs))
        task.add_done_callback(functools.partial(self._task_done_callback, task))
        return task

    def _task_done_callback(self, task: asyncio.Task, future: asyncio.Future):
        if future.cancelled():
            return
        exc = future.exception()
        if exc:
            asyncio.get_running_loop().create_task(self.handle_error(task, exc))


def get_error_handler() -> Optional[TopErrorHandler]:
    try:
        return ERROR_HANDLER.get()
    except LookupError:
        return None


def _log_task_failure(future: asyncio.Future):
    if future.cancelled():
        return
    exc = future.exception()
    if exc:
        logger.error("Background task failed\n%s", "".join(traceback.format_exception(exc)))


def spawn_task(coro, *args, **kwargs) -> asyncio.Task:
    """
    Start a background task. Under TopErrorHandler.run() failures go to the
    handler, otherwise they are logged with their traceback.
    """
    handler = get_error_handler()
    if handler is not None:
        return handler.wrap_task(coro, *args, **kwargs)
    task = asyncio.create_task(coro(*args, **kwargs))
    task.add_done_callback(_log_task_failure)
    return task
