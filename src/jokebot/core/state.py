# src/jokebot/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..subscribers.service import SubscriptionService
from .ports import ContentProvider, SubscriberRepo


@dataclass
class AppState:
    """
    Everything connectors and commands share.

    The delivery channel is not part of the state: each connector owns its
    transport and builds its DeliveryLoop around it.
    """

    # Store Settings on the state for easy access in other modules later.
    settings: Any

    store: SubscriberRepo
    provider: ContentProvider
    subscriptions: SubscriptionService
