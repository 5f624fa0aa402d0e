# tests/test_subscriber_store.py

from __future__ import annotations

from pathlib import Path

import pytest

from jokebot.subscribers.models import InvalidIntervalError, Subscriber
from jokebot.subscribers.store import DuplicateSubscriberError, SubscriberStore


def test_create_and_find(store: SubscriberStore) -> None:
    created = store.create("chat-1")
    assert created == Subscriber(identity="chat-1", enabled=True, interval_minutes=1, last_delivered_at=None)

    found = store.find_by_identity("chat-1")
    assert found == created
    assert store.find_by_identity("missing") is None
    assert store.find_by_identity("") is None


def test_identity_is_unique(store: SubscriberStore) -> None:
    store.create("chat-1")
    with pytest.raises(DuplicateSubscriberError):
        store.create("chat-1", interval_minutes=5)
    assert store.count_subscribers() == 1
    assert store.find_by_identity("chat-1").interval_minutes == 1


@pytest.mark.parametrize("bad", [0, 1441])
def test_create_rejects_invalid_interval_before_insert(store: SubscriberStore, bad: int) -> None:
    with pytest.raises(InvalidIntervalError):
        store.create("chat-1", interval_minutes=bad)
    assert store.count_subscribers() == 0


def test_find_enabled_filters_and_keeps_insertion_order(store: SubscriberStore) -> None:
    for ident in ("c", "a", "b", "d"):
        store.create(ident)
    store.save(store.find_by_identity("b").disable())

    assert [s.identity for s in store.find_enabled()] == ["c", "a", "d"]
    assert store.count_subscribers() == 4
    assert store.count_subscribers(enabled=True) == 3
    assert store.count_subscribers(enabled=False) == 1


def test_save_persists_mutable_fields(store: SubscriberStore) -> None:
    sub = store.create("chat-1")
    assert store.save(sub.with_interval(60).disable().mark_delivered(1234.5)) is True

    again = store.find_by_identity("chat-1")
    assert again.interval_minutes == 60
    assert again.enabled is False
    assert again.last_delivered_at == 1234.5


def test_save_unknown_identity_returns_false(store: SubscriberStore) -> None:
    assert store.save(Subscriber(identity="ghost")) is False
    assert store.count_subscribers() == 0


def test_save_never_moves_last_delivered_backwards(store: SubscriberStore) -> None:
    sub = store.create("chat-1")
    store.save(sub.mark_delivered(2000.0))

    # A stale snapshot (older stamp, or none at all) must not rewind the stored one.
    store.save(sub.mark_delivered(1000.0))
    assert store.find_by_identity("chat-1").last_delivered_at == 2000.0

    store.save(sub.with_interval(5))
    stored = store.find_by_identity("chat-1")
    assert stored.last_delivered_at == 2000.0
    assert stored.interval_minutes == 5


def test_mark_delivered_only_touches_the_stamp(store: SubscriberStore) -> None:
    sub = store.create("chat-1")
    store.save(sub.disable().with_interval(60))

    assert store.mark_delivered("chat-1", 2000.0) is True
    stored = store.find_by_identity("chat-1")
    assert stored == Subscriber(identity="chat-1", enabled=False, interval_minutes=60, last_delivered_at=2000.0)

    assert store.mark_delivered("chat-1", 1000.0) is True
    assert store.find_by_identity("chat-1").last_delivered_at == 2000.0


def test_mark_delivered_unknown_identity_returns_false(store: SubscriberStore) -> None:
    assert store.mark_delivered("ghost", 1000.0) is False


def test_padded_identity_matches_the_stored_row(store: SubscriberStore) -> None:
    store.create("  chat-1 ")
    assert store.find_by_identity("chat-1") is not None
    assert store.save(Subscriber(identity=" chat-1 ", interval_minutes=15)) is True
    assert store.find_by_identity("chat-1").interval_minutes == 15


def test_data_survives_reopen(tmp_path: Path) -> None:
    db = tmp_path / "subs.sqlite3"
    SubscriberStore(db).create("chat-1", interval_minutes=30)

    reopened = SubscriberStore(db)
    assert reopened.find_by_identity("chat-1").interval_minutes == 30
    assert [s.identity for s in reopened.list_subscribers()] == ["chat-1"]
