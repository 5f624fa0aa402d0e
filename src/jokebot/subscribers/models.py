# src/jokebot/subscribers/models.py

from __future__ import annotations

from dataclasses import dataclass, replace

MIN_INTERVAL_MINUTES = 1
MAX_INTERVAL_MINUTES = 1440  # 24 hours

DEFAULT_INTERVAL_MINUTES = 1


class InvalidIntervalError(ValueError):
    """Raised when an interval outside [1, 1440] minutes would be written."""

    def __init__(self, value: object) -> None:
        super().__init__(
            f"interval must be a whole number of minutes between "
            f"{MIN_INTERVAL_MINUTES} and {MAX_INTERVAL_MINUTES}, got {value!r}"
        )
        self.value = value


def validate_interval(minutes: object) -> int:
    """Return `minutes` as int or raise InvalidIntervalError."""
    # bool is an int subclass; True must not become "1 minute".
    if isinstance(minutes, bool) or not isinstance(minutes, int):
        raise InvalidIntervalError(minutes)
    if minutes < MIN_INTERVAL_MINUTES or minutes > MAX_INTERVAL_MINUTES:
        raise InvalidIntervalError(minutes)
    return minutes


def validate_identity(identity: object) -> str:
    if not isinstance(identity, str) or not identity.strip():
        raise ValueError("identity must be a non-empty string")
    return identity.strip()


@dataclass(slots=True, frozen=True)
class Subscriber:
    """
    Subscription state of one chat destination.

    The entity never persists itself: transitions return a new value and the
    caller hands it to the store.
    """

    identity: str
    enabled: bool = True
    interval_minutes: int = DEFAULT_INTERVAL_MINUTES
    last_delivered_at: float | None = None  # epoch seconds; None = never delivered

    def __post_init__(self) -> None:
        # Same normalization as the store's lookups, so save() finds the row.
        object.__setattr__(self, "identity", validate_identity(self.identity))
        validate_interval(self.interval_minutes)

    def enable(self) -> Subscriber:
        return replace(self, enabled=True)

    def disable(self) -> Subscriber:
        return replace(self, enabled=False)

    def with_interval(self, minutes: int) -> Subscriber:
        return replace(self, interval_minutes=validate_interval(minutes))

    def mark_delivered(self, now_ts: float) -> Subscriber:
        """
        Record a delivery at `now_ts`.

        last_delivered_at never moves backwards, e.g. when a slow pass
        finishes after a manual delivery already stamped a later time.
        """
        ts = float(now_ts)
        if self.last_delivered_at is not None and self.last_delivered_at > ts:
            ts = self.last_delivered_at
        return replace(self, last_delivered_at=ts)
