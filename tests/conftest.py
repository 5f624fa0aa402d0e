# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from jokebot.core.state import AppState
from jokebot.subscribers.service import SubscriptionService
from jokebot.subscribers.store import SubscriberStore

from .fakes import ScriptedProvider


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap helpers.

    We use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="jokebot-test",
        data_dir=tmp_path,
        subscribers_db_path=tmp_path / "subscribers.sqlite3",
        matrix_store_path=tmp_path / "matrix_store",
        matrix_enabled=False,
        tick_seconds=60.0,
        pacing_ms=100,
        joke_api_enabled=False,
        joke_api_url="http://jokes.invalid/random",
        joke_api_timeout_seconds=5.0,
    )


@pytest.fixture()
def store(settings: SimpleNamespace) -> SubscriberStore:
    return SubscriberStore(settings.subscribers_db_path)


@pytest.fixture()
def state(settings: SimpleNamespace, store: SubscriberStore) -> AppState:
    """
    AppState wired with a real SQLite store and a deterministic provider.

    The store is real because its correctness is part of what we want to test.
    """
    return AppState(
        settings=settings,
        store=store,
        provider=ScriptedProvider(),
        subscriptions=SubscriptionService(store),
    )
