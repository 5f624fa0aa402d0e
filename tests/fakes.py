# tests/fakes.py

from __future__ import annotations

from dataclasses import dataclass, field

from jokebot.content.jokes import Joke
from jokebot.core.ports import DeliveryChannel, Pacer
from jokebot.subscribers.models import Subscriber
from jokebot.subscribers.store import DuplicateSubscriberError


class FakeSubscriberRepo:
    """
    In-memory SubscriberRepo used for delivery loop unit tests.

    Keeps insertion order, records writes and can be told to fail queries,
    saves or delivery stamps.
    """

    def __init__(self, subscribers: list[Subscriber] | None = None) -> None:
        self.rows: dict[str, Subscriber] = {s.identity: s for s in (subscribers or [])}
        self.saves: list[Subscriber] = []
        self.fail_find = False
        self.stamps: list[tuple[str, float]] = []
        self.fail_save = False
        self.fail_stamp = False
        self.find_calls = 0

    def find_enabled(self) -> list[Subscriber]:
        self.find_calls += 1
        if self.fail_find:
            raise RuntimeError("database is locked")
        return [s for s in self.rows.values() if s.enabled]

    def find_by_identity(self, identity: str) -> Subscriber | None:
        return self.rows.get(identity)

    def save(self, subscriber: Subscriber) -> bool:
        if self.fail_save:
            raise RuntimeError("disk I/O error")
        if subscriber.identity not in self.rows:
            return False
        self.rows[subscriber.identity] = subscriber
        self.saves.append(subscriber)
        return True

    def mark_delivered(self, identity: str, delivered_at: float) -> bool:
        if self.fail_stamp:
            raise RuntimeError("disk I/O error")
        current = self.rows.get(identity)
        if current is None:
            return False
        self.rows[identity] = current.mark_delivered(delivered_at)
        self.stamps.append((identity, delivered_at))
        return True

    def create(self, identity: str, *, enabled: bool = True, interval_minutes: int = 1) -> Subscriber:
        if identity in self.rows:
            raise DuplicateSubscriberError(identity)
        sub = Subscriber(identity=identity, enabled=enabled, interval_minutes=interval_minutes)
        self.rows[identity] = sub
        return sub

    def count_subscribers(self, *, enabled: bool | None = None) -> int:
        if enabled is None:
            return len(self.rows)
        return sum(1 for s in self.rows.values() if s.enabled == enabled)


class ScriptedProvider:
    """ContentProvider returning a fixed joke, or raising when `error` is set."""

    def __init__(self, joke: Joke | None = None, error: Exception | None = None) -> None:
        self.joke = joke or Joke("Why did the test pass?", "Because it was mocked.")
        self.error = error
        self.calls = 0

    def fetch_message(self) -> Joke:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.joke

    def is_healthy(self) -> bool:
        return self.error is None


@dataclass(slots=True)
class SentMessage:
    identity: str
    text: str


@dataclass(slots=True)
class FakeChannel(DeliveryChannel):
    """
    Fake DeliveryChannel: records sends, fails for identities in `failing`.

    `events` is shared with RecordingPacer to check the interleaving.
    """

    sent: list[SentMessage] = field(default_factory=list)
    failing: set[str] = field(default_factory=set)
    events: list[str] = field(default_factory=list)

    async def send(self, identity: str, text: str) -> None:
        self.events.append(f"send:{identity}")
        if identity in self.failing:
            raise RuntimeError("Forbidden: bot was blocked by the user")
        self.sent.append(SentMessage(identity=identity, text=text))


@dataclass(slots=True)
class RecordingPacer(Pacer):
    events: list[str] = field(default_factory=list)
    waits: int = 0

    async def wait(self) -> None:
        self.waits += 1
        self.events.append("wait")
