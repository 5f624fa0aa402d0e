# src/jokebot/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the delivery core.

The delivery loop depends on Protocols instead of concrete implementations.
This keeps connectors/storage/content sources swappable and makes testing easier.
"""

from typing import Awaitable, Protocol

from ..content.jokes import Joke
from ..subscribers.models import Subscriber


class SubscriberRepo(Protocol):
    def find_enabled(self) -> list[Subscriber]: ...
    def find_by_identity(self, identity: str) -> Subscriber | None: ...
    def save(self, subscriber: Subscriber) -> bool: ...
    def mark_delivered(self, identity: str, delivered_at: float) -> bool: ...
    def create(
            self,
            identity: str,
            *,
            enabled: bool = True,
            interval_minutes: int = 1,
    ) -> Subscriber: ...
    def count_subscribers(self, *, enabled: bool | None = None) -> int: ...


class ContentProvider(Protocol):
    """One joke per call. Raises on any failure; never retries by itself."""

    def fetch_message(self) -> Joke: ...
    def is_healthy(self) -> bool: ...


class DeliveryChannel(Protocol):
    """
    Connector-side port: how the delivery loop sends text to a subscriber.

    send() raises on every failure (blocked destination, rate limit,
    malformed identity); the loop treats them all the same way.
    """

    def send(self, identity: str, text: str) -> Awaitable[None]: ...


class Pacer(Protocol):
    """Pacing policy awaited after every attempted delivery."""

    def wait(self) -> Awaitable[None]: ...
