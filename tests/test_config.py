# tests/test_config.py

from __future__ import annotations

import os
import subprocess
import sys

from jokebot.config import DEFAULT_JOKE_API_URL, MIN_PACING_MS, Settings
from jokebot.content.jokes import JokeApiProvider


def test_defaults(monkeypatch) -> None:
    for name in ("JOKEBOT_JOKE_API_URL", "JOKEBOT_PACING_MS", "JOKEBOT_TICK_SECONDS"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()

    assert settings.joke_api_url == DEFAULT_JOKE_API_URL
    assert settings.pacing_ms == MIN_PACING_MS
    assert settings.tick_seconds == 60


def test_pacing_is_clamped(monkeypatch) -> None:
    monkeypatch.setenv("JOKEBOT_PACING_MS", "5")
    assert Settings.from_env().pacing_ms == MIN_PACING_MS


def test_provider_defaults_to_configured_url() -> None:
    assert JokeApiProvider().url == DEFAULT_JOKE_API_URL


def test_settings_import_does_not_load_http_stack() -> None:
    code = "import sys, jokebot.config; print('httpx' in sys.modules, 'jokebot.content' in sys.modules)"
    env = {**os.environ, "PYTHONPATH": os.pathsep.join(p for p in sys.path if p)}
    out = subprocess.run([sys.executable, "-c", code], capture_output=True, text=True, check=True, env=env)
    assert out.stdout.split() == ["False", "False"]
