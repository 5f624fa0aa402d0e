# src/jokebot/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List

ENV_PREFIX = "JOKEBOT"

DEFAULT_JOKE_API_URL = "https://official-joke-api.appspot.com/jokes/random"

# The delivery channel rate limits bursts; never pace faster than this.
MIN_PACING_MS = 100


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    return [p.strip() for p in raw.replace(",", " ").split() if p.strip()]


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Connector flags ----
    console_enabled: bool
    matrix_enabled: bool

    # ---- Scheduling ----
    tick_seconds: float
    pacing_ms: int

    # ---- Content source ----
    joke_api_enabled: bool
    joke_api_url: str
    joke_api_timeout_seconds: float

    # ---- Matrix ----
    matrix_homeserver: str
    matrix_user_id: str
    matrix_password: str
    matrix_rooms: List[str]

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    matrix_store_path: Path
    subscribers_db_path: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "jokebot").strip() or "jokebot"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)
        matrix_enabled = _env_bool(_k("MATRIX_ENABLED"), False)

        tick_seconds = max(1.0, _env_float(_k("TICK_SECONDS"), 60.0))
        pacing_ms = max(MIN_PACING_MS, _env_int(_k("PACING_MS"), MIN_PACING_MS))

        joke_api_enabled = _env_bool(_k("JOKE_API_ENABLED"), True)
        joke_api_url = _env(_k("JOKE_API_URL"), DEFAULT_JOKE_API_URL).strip() or DEFAULT_JOKE_API_URL
        joke_api_timeout_seconds = max(0.5, _env_float(_k("JOKE_API_TIMEOUT_SECONDS"), 5.0))

        matrix_homeserver = _env(_k("MATRIX_HOMESERVER")).strip()
        matrix_user_id = _env(_k("MATRIX_USER_ID")).strip()
        matrix_password = _env(_k("MATRIX_PASSWORD")).strip()
        matrix_rooms = _env_list(_k("MATRIX_ROOMS"), [])

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/jokebot"))
        matrix_store_path = _env_path(_k("MATRIX_STORE_PATH"), data_dir / "matrix_store")
        subscribers_db_path = _env_path(_k("SUBSCRIBERS_DB_PATH"), data_dir / "subscribers.sqlite3")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            matrix_enabled=matrix_enabled,
            tick_seconds=tick_seconds,
            pacing_ms=pacing_ms,
            joke_api_enabled=joke_api_enabled,
            joke_api_url=joke_api_url,
            joke_api_timeout_seconds=joke_api_timeout_seconds,
            matrix_homeserver=matrix_homeserver,
            matrix_user_id=matrix_user_id,
            matrix_password=matrix_password,
            matrix_rooms=matrix_rooms,
            data_dir=data_dir,
            matrix_store_path=matrix_store_path,
            subscribers_db_path=subscribers_db_path,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
