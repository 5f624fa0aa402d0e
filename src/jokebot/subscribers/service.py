# src/jokebot/subscribers/service.py

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..core.ports import SubscriberRepo
from .models import DEFAULT_INTERVAL_MINUTES, Subscriber, validate_interval
from .store import DuplicateSubscriberError

logger = logging.getLogger(__name__)


class SubscriberNotFoundError(LookupError):
    """The identity has never contacted the bot."""


@dataclass(slots=True, frozen=True)
class Change:
    """Result of a mutation: the resulting state and whether anything changed."""

    subscriber: Subscriber
    changed: bool


class SubscriptionService:
    """
    Subscription mutations shared by every connector.

    Each call is a read-modify-write against the store; concurrent writers
    for the same identity resolve as last-write-wins.
    """

    def __init__(self, store: SubscriberRepo) -> None:
        self._store = store

    def get(self, identity: str) -> Subscriber | None:
        return self._store.find_by_identity(identity)

    def _require(self, identity: str) -> Subscriber:
        sub = self._store.find_by_identity(identity)
        if sub is None:
            raise SubscriberNotFoundError(identity)
        return sub

    def _save(self, sub: Subscriber) -> Subscriber:
        if not self._store.save(sub):
            raise SubscriberNotFoundError(sub.identity)
        return sub

    def register(self, identity: str) -> Change:
        """First contact: create with defaults, or return the existing record."""
        existing = self._store.find_by_identity(identity)
        if existing is not None:
            return Change(existing, changed=False)

        try:
            sub = self._store.create(identity, enabled=True, interval_minutes=DEFAULT_INTERVAL_MINUTES)
        except DuplicateSubscriberError:
            # Lost a race with another first contact from the same identity.
            return Change(self._require(identity), changed=False)

        logger.info("Subscriber registered identity=%s", sub.identity)
        return Change(sub, changed=True)

    def enable(self, identity: str) -> Change:
        sub = self._require(identity)
        if sub.enabled:
            return Change(sub, changed=False)
        sub = self._save(sub.enable())
        logger.info("Subscriber enabled identity=%s", identity)
        return Change(sub, changed=True)

    def disable(self, identity: str) -> Change:
        sub = self._require(identity)
        if not sub.enabled:
            return Change(sub, changed=False)
        sub = self._save(sub.disable())
        logger.info("Subscriber disabled identity=%s", identity)
        return Change(sub, changed=True)

    def set_interval(self, identity: str, minutes: int) -> Change:
        """Raises InvalidIntervalError before touching the store."""
        minutes = validate_interval(minutes)
        sub = self._require(identity)
        if sub.interval_minutes == minutes:
            return Change(sub, changed=False)
        sub = self._save(sub.with_interval(minutes))
        logger.info("Subscriber interval identity=%s minutes=%s", identity, minutes)
        return Change(sub, changed=True)

    def stats(self) -> tuple[int, int]:
        """(total, enabled) subscriber counts."""
        return self._store.count_subscribers(), self._store.count_subscribers(enabled=True)
