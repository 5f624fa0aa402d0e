# tests/test_subscriber_models.py

from __future__ import annotations

import pytest

from jokebot.subscribers.models import InvalidIntervalError, Subscriber, validate_interval


def test_defaults_for_new_subscriber() -> None:
    sub = Subscriber(identity="!room:example.org")
    assert sub.enabled is True
    assert sub.interval_minutes == 1
    assert sub.last_delivered_at is None


@pytest.mark.parametrize("bad", [0, -5, 1441, 10_000, 1.5, "5", True, None])
def test_invalid_intervals_are_rejected(bad) -> None:
    with pytest.raises(InvalidIntervalError):
        validate_interval(bad)
    with pytest.raises(InvalidIntervalError):
        Subscriber(identity="u1").with_interval(bad)


def test_interval_bounds_are_inclusive() -> None:
    assert Subscriber(identity="u1").with_interval(1).interval_minutes == 1
    assert Subscriber(identity="u1").with_interval(1440).interval_minutes == 1440


def test_constructor_rejects_out_of_range_interval() -> None:
    with pytest.raises(InvalidIntervalError):
        Subscriber(identity="u1", interval_minutes=0)


@pytest.mark.parametrize("identity", ["", "   "])
def test_empty_identity_is_rejected(identity: str) -> None:
    with pytest.raises(ValueError):
        Subscriber(identity=identity)


def test_identity_is_stripped() -> None:
    assert Subscriber(identity="  !room:example.org \n").identity == "!room:example.org"


def test_transitions_return_new_values() -> None:
    sub = Subscriber(identity="u1")
    off = sub.disable()
    assert sub.enabled is True
    assert off.enabled is False
    assert off.enable().enabled is True


def test_mark_delivered_never_moves_backwards() -> None:
    sub = Subscriber(identity="u1").mark_delivered(1000.0)
    assert sub.last_delivered_at == 1000.0
    assert sub.mark_delivered(2000.0).last_delivered_at == 2000.0
    assert sub.mark_delivered(500.0).last_delivered_at == 1000.0
