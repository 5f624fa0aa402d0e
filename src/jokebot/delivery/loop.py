# src/jokebot/delivery/loop.py

from __future__ import annotations

"""
Delivery loop.

One pass:
- fetches the enabled subscribers once (a snapshot),
- filters them through the eligibility engine,
- delivers to each due subscriber in store order, pacing after every attempt,
- stamps last_delivered_at only after the channel confirmed the send,
  without touching enabled/interval_minutes (commands may change them mid-pass).

A failure for one subscriber never aborts the pass. Delivery is at-least-once:
if the stamp cannot be persisted the subscriber is served again next pass.
"""

import asyncio
import logging
from collections import Counter
from collections.abc import Callable
from enum import Enum

from ..content.jokes import Joke, format_joke, random_fallback_joke
from ..core.ports import ContentProvider, DeliveryChannel, Pacer, SubscriberRepo
from ..subscribers.models import Subscriber
from .eligibility import is_due

logger = logging.getLogger(__name__)


class DeliveryOutcome(str, Enum):
    DELIVERED = "delivered"
    DISPATCH_FAILED = "dispatch_failed"
    PERSIST_FAILED = "persist_failed"  # sent, but the stamp was not stored


class DeliveryLoop:
    def __init__(
        self,
        store: SubscriberRepo,
        provider: ContentProvider,
        channel: DeliveryChannel,
        pacer: Pacer,
        *,
        fallback: Callable[[], Joke] = random_fallback_joke,
        render: Callable[[Joke], str] = format_joke,
    ) -> None:
        self._store = store
        self._provider = provider
        self._channel = channel
        self._pacer = pacer
        self._fallback = fallback
        self._render = render

    async def _fetch_text(self) -> str:
        """One provider call; any failure falls back to a built-in joke."""
        try:
            joke = await asyncio.to_thread(self._provider.fetch_message)
        except Exception as e:
            logger.warning("Content fetch failed (%s: %s); using fallback joke", e.__class__.__name__, e)
            joke = self._fallback()
        return self._render(joke)

    async def deliver(self, subscriber: Subscriber, now_ts: float) -> DeliveryOutcome:
        """Deliver one message to `subscriber` regardless of its schedule."""
        text = await self._fetch_text()

        try:
            await self._channel.send(subscriber.identity, text)
        except Exception:
            logger.exception("Dispatch failed identity=%s", subscriber.identity)
            return DeliveryOutcome.DISPATCH_FAILED

        try:
            saved = self._store.mark_delivered(subscriber.identity, now_ts)
        except Exception:
            logger.exception("Failed to persist delivery identity=%s", subscriber.identity)
            return DeliveryOutcome.PERSIST_FAILED

        if not saved:
            logger.warning("Delivery stamp not stored, subscriber row missing identity=%s", subscriber.identity)
            return DeliveryOutcome.PERSIST_FAILED

        logger.info("Delivered identity=%s", subscriber.identity)
        return DeliveryOutcome.DELIVERED

    async def deliver_identity(self, identity: str, now_ts: float) -> DeliveryOutcome | None:
        """Manual delivery (/joke, /start). None if the identity is unknown."""
        subscriber = self._store.find_by_identity(identity)
        if subscriber is None:
            return None
        return await self.deliver(subscriber, now_ts)

    async def run_pass(self, now_ts: float) -> None:
        try:
            subscribers = self._store.find_enabled()
        except Exception:
            logger.exception("find_enabled failed; pass aborted")
            return

        outcomes: Counter[DeliveryOutcome] = Counter()

        for subscriber in subscribers:
            if not is_due(subscriber, now_ts):
                continue

            try:
                outcome = await self.deliver(subscriber, now_ts)
            except Exception:
                # deliver() handles its own failures; this only guards the pass.
                logger.exception("Delivery crashed identity=%s", subscriber.identity)
                outcome = DeliveryOutcome.DISPATCH_FAILED
            outcomes[outcome] += 1

            await self._pacer.wait()

        logger.debug(
            "Pass done enabled=%d delivered=%d dispatch_failed=%d persist_failed=%d",
            len(subscribers),
            outcomes[DeliveryOutcome.DELIVERED],
            outcomes[DeliveryOutcome.DISPATCH_FAILED],
            outcomes[DeliveryOutcome.PERSIST_FAILED],
        )
