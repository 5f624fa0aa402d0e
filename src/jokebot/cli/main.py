# src/jokebot/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then starts exactly one connector:
- Matrix (background thread, owns the delivery scheduler) when enabled,
- otherwise the console REPL with a printing delivery channel.
"""

from __future__ import annotations

import logging
import signal
import threading

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop, start_console_scheduler
from ..connectors.runner import BackgroundRunner
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def install_signal_handlers(stop_event: threading.Event, *, handle_sigint: bool = True) -> list[int]:
    """Set `stop_event` on SIGTERM (and SIGINT if asked). Returns the signals hooked."""

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        stop_event.set()

    wanted = [signal.SIGTERM]
    if handle_sigint:
        wanted.insert(0, signal.SIGINT)

    installed: list[int] = []
    for signum in wanted:
        try:
            signal.signal(signum, _handle_signal)
        except (ValueError, OSError):
            # Not on the main thread, or unsupported on this platform.
            continue
        installed.append(signum)
    return installed


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)

    if state.provider.is_healthy():
        logger.info("Content source reachable.")
    else:
        logger.warning("Content source unreachable; fallback jokes will be used until it recovers.")

    if settings.matrix_enabled and settings.console_enabled:
        # Console deliveries cannot reach Matrix rooms; one scheduler per store.
        logger.warning("Both connectors enabled; running Matrix only.")

    stop_main = threading.Event()
    # The console REPL needs the default SIGINT so input() raises KeyboardInterrupt.
    install_signal_handlers(stop_main, handle_sigint=settings.matrix_enabled)

    runner: BackgroundRunner | None = None
    try:
        if settings.matrix_enabled:
            from ..connectors.matrix_connector import start_matrix_in_background

            runner = start_matrix_in_background(state)
            if runner is None:
                return
            logger.info("Matrix connector running. Press Ctrl+C to stop.")
            stop_main.wait()

        elif settings.console_enabled:
            delivery, runner = start_console_scheduler(state)
            if runner is None:
                return
            run_console_loop(state, delivery, runner)

        else:
            logger.error("No connector enabled (JOKEBOT_CONSOLE_ENABLED / JOKEBOT_MATRIX_ENABLED).")

    finally:
        if runner is not None:
            runner.stop()
            runner.join(timeout=10.0)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
