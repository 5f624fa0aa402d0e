# src/jokebot/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (store/content provider),
- builds a DeliveryLoop around a connector's delivery channel.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..content.jokes import JokeApiProvider
from ..content.offline import OfflineJokeProvider
from ..core.ports import ContentProvider, DeliveryChannel
from ..core.state import AppState
from ..delivery.loop import DeliveryLoop
from ..delivery.pacing import FixedDelayPacer
from ..subscribers.service import SubscriptionService
from ..subscribers.store import SubscriberStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.subscribers_db_path.parent.mkdir(parents=True, exist_ok=True)
    if settings.matrix_enabled:
        settings.matrix_store_path.mkdir(parents=True, exist_ok=True)


def create_content_provider(settings) -> ContentProvider:
    if not settings.joke_api_enabled:
        logger.info("Joke API disabled; using offline jokes.")
        return OfflineJokeProvider()
    return JokeApiProvider(settings.joke_api_url, timeout_seconds=settings.joke_api_timeout_seconds)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = SubscriberStore(settings.subscribers_db_path)
    return AppState(
        settings=settings,
        store=store,
        provider=create_content_provider(settings),
        subscriptions=SubscriptionService(store),
    )


def build_delivery_loop(state: AppState, channel: DeliveryChannel) -> DeliveryLoop:
    pacing_ms = int(getattr(state.settings, "pacing_ms", 100))
    return DeliveryLoop(
        state.store,
        state.provider,
        channel,
        FixedDelayPacer(pacing_ms / 1000.0),
    )
