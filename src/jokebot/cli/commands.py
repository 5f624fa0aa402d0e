# src/jokebot/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from ..core.state import AppState
from ..subscribers.models import MAX_INTERVAL_MINUTES, MIN_INTERVAL_MINUTES, InvalidIntervalError, Subscriber

logger = logging.getLogger(__name__)

NOT_STARTED = "Please start the bot first with /start"
INTERNAL_ERROR = "Sorry, something went wrong. Please try again."


@dataclass(slots=True, frozen=True)
class CommandResult:
    """
    Reply text plus an optional request for an immediate delivery.

    Connectors own the delivery channel, so they perform the delivery after
    sending the reply.
    """

    reply: str
    deliver_now: bool = False


CommandHandler = Callable[[AppState, list[str], str], CommandResult]


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /start, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str, identity: str) -> CommandResult | None:
        """
        Handle a string like "/command args" sent from `identity`.
        Returns None if the line is not a command.
        """
        line = line.strip()
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return CommandResult("Empty command. Use /help to list available commands.")

        # "/status@botname" style suffixes
        name = parts[0].split("@", 1)[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return CommandResult(f"Unknown command: /{name}. Use /help to list available commands.")

        try:
            return handler(state, args, identity)
        except Exception:
            logger.exception("Command /%s failed identity=%s", name, identity)
            return CommandResult(INTERNAL_ERROR)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _ts_local(ts: float) -> str:
    return datetime.fromtimestamp(ts).astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _describe(sub: Subscriber) -> str:
    status = "enabled" if sub.enabled else "disabled"
    last = (
        f"Last joke: {_ts_local(sub.last_delivered_at)}"
        if sub.last_delivered_at is not None
        else "No jokes sent yet"
    )
    return f"Status: {status}\nFrequency: {sub.interval_minutes} minute(s)\n{last}"


def cmd_help(state: AppState, args: list[str], identity: str) -> CommandResult:
    return CommandResult(registry.build_help())


def cmd_start(state: AppState, args: list[str], identity: str) -> CommandResult:
    change = state.subscriptions.register(identity)
    sub = change.subscriber
    if change.changed:
        return CommandResult(
            f"Welcome to the Joke Bot! I'll send you a random joke every "
            f"{sub.interval_minutes} minute(s).\n\n{registry.build_help()}",
            deliver_now=True,
        )
    return CommandResult(f"Welcome back! You're already registered.\n\n{_describe(sub)}")


def cmd_enable(state: AppState, args: list[str], identity: str) -> CommandResult:
    if state.subscriptions.get(identity) is None:
        return CommandResult(NOT_STARTED)
    change = state.subscriptions.enable(identity)
    if not change.changed:
        return CommandResult("Joke delivery is already enabled!")
    return CommandResult(
        f"Joke delivery enabled! You'll receive jokes every "
        f"{change.subscriber.interval_minutes} minute(s).",
        deliver_now=True,
    )


def cmd_disable(state: AppState, args: list[str], identity: str) -> CommandResult:
    if state.subscriptions.get(identity) is None:
        return CommandResult(NOT_STARTED)
    change = state.subscriptions.disable(identity)
    if not change.changed:
        return CommandResult("Joke delivery is already disabled!")
    return CommandResult("Joke delivery disabled. Send /enable to resume receiving jokes.")


def cmd_frequency(state: AppState, args: list[str], identity: str) -> CommandResult:
    """
    /frequency N -> deliver every N minutes (1..1440)
    """
    usage = (
        f"Usage: /frequency <minutes>, between {MIN_INTERVAL_MINUTES} "
        f"and {MAX_INTERVAL_MINUTES} (24 hours)."
    )
    if len(args) != 1:
        return CommandResult(usage)

    try:
        minutes = int(args[0])
    except ValueError:
        return CommandResult(usage)

    if state.subscriptions.get(identity) is None:
        return CommandResult(NOT_STARTED)

    try:
        state.subscriptions.set_interval(identity, minutes)
    except InvalidIntervalError:
        return CommandResult(usage)

    return CommandResult(f"Frequency updated! You'll now receive jokes every {minutes} minute(s).")


def cmd_status(state: AppState, args: list[str], identity: str) -> CommandResult:
    sub = state.subscriptions.get(identity)
    if sub is None:
        return CommandResult(NOT_STARTED)
    return CommandResult(_describe(sub))


def cmd_joke(state: AppState, args: list[str], identity: str) -> CommandResult:
    if state.subscriptions.get(identity) is None:
        return CommandResult(NOT_STARTED)
    return CommandResult("", deliver_now=True)


def cmd_stats(state: AppState, args: list[str], identity: str) -> CommandResult:
    total, enabled = state.subscriptions.stats()
    return CommandResult(f"Subscribers: {total} total, {enabled} enabled.")


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("start", cmd_start, help_text="Start receiving jokes.")
registry.register("enable", cmd_enable, help_text="Resume joke delivery.")
registry.register("disable", cmd_disable, help_text="Pause joke delivery.")
registry.register("frequency", cmd_frequency, help_text="Set frequency: /frequency <1-1440 minutes>.")
registry.register("status", cmd_status, help_text="Show your current settings.")
registry.register("joke", cmd_joke, help_text="Get a joke right now.")
registry.register("stats", cmd_stats, help_text="Show subscriber totals.")
