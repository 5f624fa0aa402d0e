# src/jokebot/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from datetime import datetime

from ..cli.bootstrap import build_delivery_loop
from ..cli.commands import CommandRegistry
from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..delivery.loop import DeliveryLoop
from ..delivery.trigger import run_delivery_scheduler
from .runner import BackgroundRunner, run_until_stopped, start_in_background

logger = logging.getLogger(__name__)

CONSOLE_IDENTITY = "console"


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


class ConsoleDeliveryChannel:
    """Delivery channel that prints messages to the terminal."""

    def __init__(self, write: Callable[[str], None] = _print_ts) -> None:
        self._write = write

    async def send(self, identity: str, text: str) -> None:
        self._write(f"<<< [{identity}]\n{text}\n")


def start_console_scheduler(state: AppState) -> tuple[DeliveryLoop, BackgroundRunner | None]:
    """Delivery loop + scheduler on a background loop, printing to this terminal."""
    delivery = build_delivery_loop(state, ConsoleDeliveryChannel())
    tick = float(getattr(state.settings, "tick_seconds", 60.0))

    async def service(stop_event: asyncio.Event) -> None:
        await run_until_stopped(run_delivery_scheduler(delivery, interval_seconds=tick), stop_event)

    return delivery, start_in_background(service, name="jokebot-scheduler")


def handle_console_line(
    state: AppState,
    line: str,
    *,
    emit: Callable[[str], None],
    deliver: Callable[[str], None],
    registry: CommandRegistry = command_registry,
    identity: str = CONSOLE_IDENTITY,
) -> None:
    """
    Route one console line: emit the reply, then deliver if the command asked for it.
    """
    result = registry.handle(state, line, identity)
    if result is None:
        emit("Use /help to list available commands.")
        return

    if result.reply:
        emit(result.reply)

    if result.deliver_now:
        try:
            deliver(identity)
        except Exception:
            logger.exception("Immediate delivery failed identity=%s", identity)


def run_console_loop(state: AppState, delivery: DeliveryLoop, runner: BackgroundRunner) -> None:
    logger.info("Console connector started (identity=%s).", CONSOLE_IDENTITY)
    _print_ts("[CONSOLE] Type /start to subscribe. Use /help for commands. Use /exit to quit.\n")

    def deliver(identity: str) -> None:
        runner.submit(delivery.deliver_identity(identity, time.time()))

    while True:
        try:
            user_input = input(">>> You: ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        handle_console_line(state, user_input, emit=_print_ts, deliver=deliver)

    logger.info("Console connector finished.")
