# src/jokebot/content/jokes.py

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Any

import httpx

from .. import __version__
from ..config import DEFAULT_JOKE_API_URL

logger = logging.getLogger(__name__)


class ContentError(RuntimeError):
    """Base error for content fetch failures."""


class ContentConnectionError(ContentError):
    """Connection error or timeout."""


class ContentHTTPError(ContentError):
    """The content source answered with a non-2xx status."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"joke API error: status_code={status_code}")
        self.status_code = status_code


class ContentFormatError(ContentError):
    """The payload is not a joke with a setup and a punchline."""


@dataclass(slots=True, frozen=True)
class Joke:
    setup: str
    punchline: str


FALLBACK_JOKES: tuple[Joke, ...] = (
    Joke("Why don't scientists trust atoms?", "Because they make up everything!"),
    Joke("What do you call a fake noodle?", "An impasta!"),
    Joke("Why did the scarecrow win an award?", "He was outstanding in his field!"),
    Joke("What do you call a bear with no teeth?", "A gummy bear!"),
)


def random_fallback_joke() -> Joke:
    return random.choice(FALLBACK_JOKES)


def format_joke(joke: Joke) -> str:
    return f"Here's your joke:\n\n{joke.setup}\n\n{joke.punchline}"


def parse_joke(payload: Any) -> Joke:
    """Validate a decoded API payload ({"setup": ..., "punchline": ...})."""
    if not isinstance(payload, dict):
        raise ContentFormatError("Invalid joke format received from API")

    setup = payload.get("setup")
    punchline = payload.get("punchline")
    if not isinstance(setup, str) or not isinstance(punchline, str):
        raise ContentFormatError("Invalid joke format received from API")

    setup = setup.strip()
    punchline = punchline.strip()
    if not setup or not punchline:
        raise ContentFormatError("Invalid joke format received from API")

    return Joke(setup=setup, punchline=punchline)


class JokeApiProvider:
    """
    HTTP client for a random-joke endpoint.

    Exactly one request per fetch_message(); failures raise ContentError and
    the caller decides about the fallback.
    """

    def __init__(
        self,
        url: str = DEFAULT_JOKE_API_URL,
        *,
        timeout_seconds: float = 5.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._url = url
        self._timeout = float(timeout_seconds)
        self._transport = transport

    @property
    def url(self) -> str:
        return self._url

    def _build_headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "User-Agent": f"jokebot/{__version__}",
        }

    def _get(self, timeout: float) -> httpx.Response:
        try:
            with httpx.Client(timeout=timeout, transport=self._transport) as client:
                return client.get(self._url, headers=self._build_headers())
        except httpx.RequestError as exc:
            raise ContentConnectionError(str(exc)) from exc

    def fetch_message(self) -> Joke:
        response = self._get(self._timeout)

        if response.status_code // 100 != 2:
            raise ContentHTTPError(response.status_code)

        try:
            payload = response.json()
        except ValueError as exc:
            raise ContentFormatError("joke API returned non-JSON body") from exc

        return parse_joke(payload)

    def is_healthy(self) -> bool:
        try:
            response = self._get(min(self._timeout, 3.0))
        except ContentError as e:
            logger.warning("Joke API health check failed: %s", e)
            return False

        healthy = response.status_code // 100 == 2
        if not healthy:
            logger.warning("Joke API health check failed: status_code=%s", response.status_code)
        return healthy
