# src/jokebot/delivery/pacing.py

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

MIN_DELAY_SECONDS = 0.1

Sleeper = Callable[[float], Awaitable[None]]


class FixedDelayPacer:
    """
    Waits a fixed delay after every delivery attempt.

    The delay is clamped to MIN_DELAY_SECONDS so a misconfiguration cannot
    burst messages into the chat provider's rate limiter.
    """

    def __init__(self, delay_seconds: float = MIN_DELAY_SECONDS, *, sleep: Sleeper | None = None) -> None:
        self._delay = max(MIN_DELAY_SECONDS, float(delay_seconds))
        self._sleep = sleep or asyncio.sleep

    @property
    def delay_seconds(self) -> float:
        return self._delay

    async def wait(self) -> None:
        await self._sleep(self._delay)
