# src/jokebot/delivery/eligibility.py

from __future__ import annotations

from ..subscribers.models import Subscriber


def is_due(subscriber: Subscriber, now_ts: float) -> bool:
    """
    Whether `subscriber` should receive a delivery at `now_ts` (epoch seconds).

    - disabled -> never due
    - never delivered -> always due
    - otherwise due once the real elapsed time reaches the interval
      (boundary inclusive; elapsed time is not truncated to whole minutes)
    """
    if not subscriber.enabled:
        return False

    if subscriber.last_delivered_at is None:
        return True

    elapsed_s = float(now_ts) - subscriber.last_delivered_at
    return elapsed_s >= subscriber.interval_minutes * 60.0
