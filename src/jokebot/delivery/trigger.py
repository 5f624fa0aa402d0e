# src/jokebot/delivery/trigger.py

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable

from .loop import DeliveryLoop

logger = logging.getLogger(__name__)


async def run_delivery_scheduler(
        loop: DeliveryLoop,
        *,
        interval_seconds: float = 60.0,
        clock: Callable[[], float] = time.time,
) -> None:
    """
    Periodic trigger: one delivery pass per tick.

    Passes run back to back inside this coroutine, so two passes started by
    the same scheduler never overlap. A pass longer than the tick makes the
    next one start right away.

    To stop the scheduler, cancel the coroutine/task.
    """
    tick_s = max(0.01, float(interval_seconds))
    logger.info("Delivery scheduler started (tick=%.1fs).", tick_s)

    while True:
        started = time.monotonic()

        try:
            await loop.run_pass(clock())
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Delivery pass crashed")

        elapsed = time.monotonic() - started
        if elapsed > tick_s:
            logger.warning("Delivery pass took %.1fs, longer than the %.1fs tick", elapsed, tick_s)
        await asyncio.sleep(max(0.0, tick_s - elapsed))
