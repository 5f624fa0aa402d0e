# tests/test_subscription_service.py

from __future__ import annotations

import pytest

from jokebot.subscribers.models import InvalidIntervalError
from jokebot.subscribers.service import SubscriberNotFoundError, SubscriptionService

from .fakes import FakeSubscriberRepo


def test_register_is_idempotent() -> None:
    service = SubscriptionService(FakeSubscriberRepo())

    first = service.register("u1")
    second = service.register("u1")

    assert first.changed is True
    assert second.changed is False
    assert second.subscriber == first.subscriber


def test_mutations_report_changes() -> None:
    repo = FakeSubscriberRepo()
    service = SubscriptionService(repo)
    service.register("u1")

    assert service.disable("u1").changed is True
    assert service.disable("u1").changed is False
    assert service.enable("u1").changed is True
    assert service.set_interval("u1", 15).subscriber.interval_minutes == 15
    assert service.set_interval("u1", 15).changed is False
    assert len(repo.saves) == 3


def test_invalid_interval_never_reaches_the_store() -> None:
    repo = FakeSubscriberRepo()
    service = SubscriptionService(repo)
    service.register("u1")

    with pytest.raises(InvalidIntervalError):
        service.set_interval("u1", 1441)
    assert repo.saves == []


def test_unknown_identity() -> None:
    service = SubscriptionService(FakeSubscriberRepo())
    assert service.get("ghost") is None
    with pytest.raises(SubscriberNotFoundError):
        service.enable("ghost")


def test_stats() -> None:
    service = SubscriptionService(FakeSubscriberRepo())
    service.register("a")
    service.register("b")
    service.disable("b")
    assert service.stats() == (2, 1)
