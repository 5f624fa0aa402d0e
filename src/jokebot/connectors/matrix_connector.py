# src/jokebot/connectors/matrix_connector.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from typing import Optional, Set

from nio import MatrixRoom, RoomMessageText

from ..cli.bootstrap import build_delivery_loop
from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..delivery.trigger import run_delivery_scheduler
from .matrix_client import MatrixDeliveryChannel, create_matrix_client
from .runner import BackgroundRunner, start_in_background

logger = logging.getLogger(__name__)


def _ms_now() -> int:
    return int(time.time() * 1000)


def _room_allowlist(settings_rooms: list[str]) -> Optional[Set[str]]:
    rooms = [r.strip() for r in (settings_rooms or []) if str(r).strip()]
    return set(rooms) if rooms else None


async def _run_matrix_bot(state: AppState, stop_event: asyncio.Event) -> None:
    """
    Matrix connector (async):

    init -> delivery scheduler -> callbacks -> sync loop

    Every room is one subscriber identity. Shutdown: the main thread sets
    stop_event; the manual sync loop checks it between syncs.
    """
    settings = state.settings
    startup_ts = _ms_now()

    allowed_rooms = _room_allowlist(getattr(settings, "matrix_rooms", []) or [])
    logger.info("Matrix allowed_rooms=%s", allowed_rooms if allowed_rooms is not None else "ALL")

    client = await create_matrix_client(settings)
    if client is None:
        logger.error("Matrix client creation failed; connector will stop.")
        return

    channel = MatrixDeliveryChannel(client)
    delivery = build_delivery_loop(state, channel)

    scheduler_task = asyncio.create_task(
        run_delivery_scheduler(delivery, interval_seconds=float(getattr(settings, "tick_seconds", 60.0)))
    )

    async def message_callback(room: MatrixRoom, event: RoomMessageText) -> None:
        # Ignore history replayed by the first sync.
        ts = getattr(event, "server_timestamp", None)
        if ts is not None and ts <= startup_ts:
            return

        if event.sender == client.user_id:
            return

        if allowed_rooms is not None and room.room_id not in allowed_rooms:
            return

        body = (event.body or "").strip()
        if not body.startswith("/"):
            return

        logger.info("Matrix <%s> %s: %r", room.display_name, event.sender, body)

        result = command_registry.handle(state, body, room.room_id)
        if result is None:
            return

        try:
            if result.reply:
                await channel.send(room.room_id, result.reply)
            if result.deliver_now:
                await delivery.deliver_identity(room.room_id, time.time())
        except Exception:
            logger.exception("Failed to answer command in room %s.", room.room_id)

    client.add_event_callback(message_callback, RoomMessageText)

    # ---- Sync loop ----

    try:
        logger.info("Matrix initial sync...")
        await client.sync(timeout=30000, full_state=True)
        logger.info("Matrix initial sync done. Joined rooms: %d", len(client.rooms))

        while not stop_event.is_set():
            await client.sync(timeout=30000, full_state=False)

    except asyncio.CancelledError:
        logger.info("Matrix connector cancelled.")
    except Exception:
        logger.exception("Matrix connector crashed.")
    finally:
        scheduler_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await scheduler_task

        with contextlib.suppress(Exception):
            await client.close()

        logger.info("Matrix connector stopped.")


def start_matrix_in_background(state: AppState) -> BackgroundRunner | None:
    settings = state.settings
    if not settings.matrix_homeserver or not settings.matrix_user_id:
        logger.error("Matrix is enabled but not configured (homeserver/user_id).")
        return None

    async def service(stop_event: asyncio.Event) -> None:
        await _run_matrix_bot(state, stop_event)

    return start_in_background(service, name="jokebot-matrix")
