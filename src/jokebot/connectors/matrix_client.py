# src/jokebot/connectors/matrix_client.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path
from typing import Any

from nio import AsyncClient, AsyncClientConfig, LoginResponse, RoomSendError

logger = logging.getLogger(__name__)


class MatrixSendError(RuntimeError):
    """room_send answered with an error response (nio does not raise)."""


def _session_path(store_dir: Path) -> Path:
    return store_dir / "session.json"


def _load_json(path: Path) -> dict[str, Any]:
    val = json.loads(path.read_text("utf-8"))
    if isinstance(val, dict):
        return val
    raise ValueError("Expected JSON object")


def _atomic_write_json(path: Path, data: dict[str, Any]) -> None:
    tmp = path.with_suffix(".tmp")
    tmp.write_text(json.dumps(data, ensure_ascii=False), "utf-8")
    os.replace(tmp, path)
    with contextlib.suppress(OSError):
        # Not critical on Windows or restricted FS.
        os.chmod(path, 0o600)


class MatrixDeliveryChannel:
    """Delivery channel posting m.text messages; identity is the room id."""

    def __init__(self, client: AsyncClient) -> None:
        self._client = client

    async def send(self, identity: str, text: str) -> None:
        resp = await self._client.room_send(
            room_id=identity,
            message_type="m.room.message",
            content={"msgtype": "m.text", "body": text},
            ignore_unverified_devices=True,
        )
        if isinstance(resp, RoomSendError):
            raise MatrixSendError(f"room_send failed room={identity}: {resp.message} ({resp.status_code})")


async def create_matrix_client(settings) -> AsyncClient | None:
    """
    Create a Matrix AsyncClient (no E2EE).

    The access token is persisted in session.json so restarts do not log in
    again; the file holds a secret and lives under the gitignored data dir.
    """
    homeserver = (getattr(settings, "matrix_homeserver", "") or "").strip()
    user_id = (getattr(settings, "matrix_user_id", "") or "").strip()
    password = (getattr(settings, "matrix_password", "") or "").strip()
    store_dir = Path(getattr(settings, "matrix_store_path", Path(".local/jokebot/matrix_store")))

    if not homeserver or not user_id:
        logger.error("Matrix is not configured: set JOKEBOT_MATRIX_HOMESERVER and JOKEBOT_MATRIX_USER_ID")
        return None

    store_dir.mkdir(parents=True, exist_ok=True)
    session_file = _session_path(store_dir)

    client = AsyncClient(
        homeserver,
        user_id,
        config=AsyncClientConfig(encryption_enabled=False, store_sync_tokens=False),
    )

    # ---- Session restore ----
    if session_file.exists():
        try:
            data = _load_json(session_file)

            access_token = data.get("access_token")
            sess_user_id = data.get("user_id")
            device_id = data.get("device_id")

            if not access_token or not sess_user_id or not device_id:
                raise ValueError("session.json is missing required fields")

            client.access_token = str(access_token)
            client.user_id = str(sess_user_id)
            client.device_id = str(device_id)
            logger.info("Matrix session restored for %s", client.user_id)
            return client
        except (OSError, ValueError) as e:
            logger.warning("Failed to restore Matrix session.json, will try password login: %r", e)

    # ---- Password login bootstrap ----
    if not password:
        logger.error(
            "Matrix session.json not found and password is not set. "
            "Set JOKEBOT_MATRIX_PASSWORD once to bootstrap a session."
        )
        await client.close()
        return None

    device_name = f"{getattr(settings, 'app_name', 'jokebot')} (Python)"
    logger.info("Logging in to Matrix to bootstrap a new session (device_name=%r)...", device_name)

    resp = await client.login(password=password, device_name=device_name)
    if not isinstance(resp, LoginResponse):
        logger.error("Matrix login failed: %r", resp)
        await client.close()
        return None

    try:
        _atomic_write_json(
            session_file,
            {"access_token": resp.access_token, "user_id": resp.user_id, "device_id": resp.device_id},
        )
        logger.info("Matrix session saved to %s (user=%s)", session_file, resp.user_id)
    except OSError as e:
        # The login is still usable for this run.
        logger.error("Failed to write Matrix session.json (%s): %r", session_file, e)

    return client
