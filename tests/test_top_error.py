"""Tests for background task error routing."""

import asyncio
import logging
import pytest

from vadclips.utils.top_error import TopErrorHandler, get_error_handler, spawn_task


class Boom(Exception):
    pass


class Callback:

    def __init__(self):
        self.errors = []

    async def on_error(self, error_dict):
        self.errors.append(error_dict)


class Shutdown:

    def __init__(self):
        self.messages = []

    async def shutdown(self, message=None):
        self.messages.append(message)


async def failing():
    raise Boom("timer callback failed")


def test_wrapped_task_failure_reaches_handler():
    callback = Callback()
    shutdown = Shutdown()
    handler = TopErrorHandler(top_level_callback=callback, clean_shutdown=shutdown)

    async def main():
        assert get_error_handler() is handler
        spawn_task(failing)
        await asyncio.sleep(0.05)
        return "done"

    assert handler.run(main) == "done"
    assert len(handler.error_dicts) == 1
    assert isinstance(callback.errors[0]["exception"], Boom)
    assert "timer callback failed" in shutdown.messages[0]
    assert get_error_handler() is None


@pytest.mark.asyncio
async def test_failure_without_handler_is_logged(caplog):
    with caplog.at_level(logging.ERROR, logger="TopErrorHandler"):
        spawn_task(failing)
        await asyncio.sleep(0.05)
    assert "Background task failed" in caplog.text
    assert "Boom" in caplog.text


@pytest.mark.asyncio
async def test_cancelled_task_is_not_an_error(caplog):
    handler = TopErrorHandler()

    async def main():
        task = spawn_task(asyncio.sleep, 10)
        await asyncio.sleep(0)
        task.cancel()
        await asyncio.sleep(0.01)

    with caplog.at_level(logging.ERROR, logger="TopErrorHandler"):
        await handler.async_run(main)
    assert handler.error_dicts == []
    assert "raised exception" not in caplog.text
