# src/jokebot/content/offline.py

from __future__ import annotations

import itertools
import threading

from .jokes import FALLBACK_JOKES, Joke


class OfflineJokeProvider:
    """
    Offline deterministic provider used for demos when the joke API is disabled.

    Cycles through the built-in jokes; never fails.
    """

    def __init__(self, jokes: tuple[Joke, ...] = FALLBACK_JOKES) -> None:
        if not jokes:
            raise ValueError("jokes must not be empty")
        self._cycle = itertools.cycle(jokes)
        self._lock = threading.Lock()

    def fetch_message(self) -> Joke:
        with self._lock:
            return next(self._cycle)

    def is_healthy(self) -> bool:
        return True
