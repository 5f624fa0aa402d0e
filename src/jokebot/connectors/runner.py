# src/jokebot/connectors/runner.py

from __future__ import annotations

import asyncio
import concurrent.futures
import contextlib
import logging
import threading
from collections.abc import Awaitable, Callable, Coroutine
from dataclasses import dataclass
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Service = Callable[[asyncio.Event], Awaitable[None]]


@dataclass
class BackgroundRunner:
    """An async service running on its own event loop in a daemon thread."""

    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    stop_event: asyncio.Event

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.stop_event.set)
        except Exception:
            logger.debug("Failed to signal background stop.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)

    def submit(self, coro: Coroutine[Any, Any, T], timeout: float | None = 30.0) -> T:
        """Run `coro` on the runner's loop and wait for its result from another thread."""
        fut = asyncio.run_coroutine_threadsafe(coro, self.loop)
        try:
            return fut.result(timeout=timeout)
        except concurrent.futures.TimeoutError:
            fut.cancel()
            raise


def start_in_background(service: Service, *, name: str) -> BackgroundRunner | None:
    """
    Start `service(stop_event)` in a background thread.

    Why a thread:
    - the console REPL is blocking (input()).
    - connectors and the scheduler are async and want their own event loop.
    """
    ready = threading.Event()
    holder: dict[str, object] = {}

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        stop_event = asyncio.Event()

        holder["loop"] = loop
        holder["stop_event"] = stop_event
        ready.set()

        try:
            loop.run_until_complete(service(stop_event))
        except Exception:
            logger.exception("Background service %s crashed.", name)
        finally:
            with contextlib.suppress(Exception):
                loop.stop()
            with contextlib.suppress(Exception):
                loop.close()

    t = threading.Thread(target=runner, name=name, daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")
    stop_event = holder.get("stop_event")

    if not isinstance(loop, asyncio.AbstractEventLoop) or not isinstance(stop_event, asyncio.Event):
        logger.error("Background thread %s did not initialize properly.", name)
        return None

    logger.info("Background thread %s started.", name)
    return BackgroundRunner(thread=t, loop=loop, stop_event=stop_event)


async def run_until_stopped(coro: Coroutine[Any, Any, None], stop_event: asyncio.Event) -> None:
    """Run `coro` as a task until stop_event is set, then cancel it."""
    task = asyncio.create_task(coro)
    try:
        await stop_event.wait()
    finally:
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
