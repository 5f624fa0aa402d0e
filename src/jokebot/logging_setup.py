# src/jokebot/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Console thresholds by logger prefix; the longest matching prefix wins.
# Delivery and Matrix run in a background thread and log once per send,
# which would interleave with the REPL prompt.
CONSOLE_LEVELS: dict[str, int] = {
    "jokebot": logging.DEBUG,
    "jokebot.delivery": logging.WARNING,
    "jokebot.connectors.matrix_": logging.WARNING,
    "py.warnings": logging.ERROR,
    "nio": logging.ERROR,
}
THIRD_PARTY_LEVEL = logging.ERROR


class _ConsoleNoiseFilter(logging.Filter):
    """Drop records below the threshold configured for their logger prefix."""

    def __init__(self, levels: dict[str, int] | None = None, default: int = THIRD_PARTY_LEVEL) -> None:
        super().__init__()
        # Longest first so "jokebot.delivery" shadows "jokebot".
        self._levels = sorted((levels or CONSOLE_LEVELS).items(), key=lambda kv: len(kv[0]), reverse=True)
        self._default = default

    def threshold(self, name: str) -> int:
        for prefix, level in self._levels:
            if name == prefix or name.startswith(prefix if prefix.endswith("_") else prefix + "."):
                return level
        return self._default

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= self.threshold(record.name)


def setup_logging(
    *,
    log_dir: str | Path = ".local/jokebot",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Console handler on stderr, filtered per logger; file handler with everything.

    Returns the log file path. Call once, before the first log line.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "jokebot.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    logfile = logging.FileHandler(str(log_file), encoding="utf-8")
    logfile.setLevel(file_level)
    logfile.setFormatter(fmt)
    root.addHandler(logfile)

    logging.captureWarnings(True)

    # httpx logs one INFO line per request; the joke fetch runs every tick.
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)

    return log_file
