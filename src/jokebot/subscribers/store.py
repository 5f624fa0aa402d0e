# src/jokebot/subscribers/store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
from pathlib import Path

from .models import (
    DEFAULT_INTERVAL_MINUTES,
    Subscriber,
    validate_identity,
    validate_interval,
)

logger = logging.getLogger(__name__)


class DuplicateSubscriberError(ValueError):
    """Raised by create() when the identity is already registered."""


class SubscriberStore:
    """
    SQLite subscriber store.

    The schema is simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "subscribers.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        try:
            total = self.count_subscribers()
        except Exception:
            total = -1
        logger.info("SubscriberStore ready db=%s total=%s", self._db_path, total)

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(sqlite3.DatabaseError):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS subscribers (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    identity TEXT NOT NULL UNIQUE,
                    enabled INTEGER NOT NULL DEFAULT 1,
                    interval_minutes INTEGER NOT NULL DEFAULT 1,
                    last_delivered_at REAL,
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )

            cur.execute("PRAGMA table_info(subscribers)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE subscribers ADD COLUMN {name} {decl}")
                logger.info("SubscriberStore migration: added column %s", name)

            add_col("enabled", "INTEGER NOT NULL DEFAULT 1")
            add_col("interval_minutes", "INTEGER NOT NULL DEFAULT 1")
            add_col("last_delivered_at", "REAL")
            add_col("created_at", "REAL NOT NULL DEFAULT 0")
            add_col("updated_at", "REAL NOT NULL DEFAULT 0")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_subscribers_enabled ON subscribers(enabled)")
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_subscriber(row: sqlite3.Row) -> Subscriber:
        return Subscriber(
            identity=str(row["identity"]),
            enabled=bool(row["enabled"]),
            interval_minutes=int(row["interval_minutes"]),
            last_delivered_at=(
                float(row["last_delivered_at"]) if row["last_delivered_at"] is not None else None
            ),
        )

    # ---- public API ----

    def count_subscribers(self, *, enabled: bool | None = None) -> int:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            if enabled is None:
                cur.execute("SELECT COUNT(*) FROM subscribers")
            else:
                cur.execute("SELECT COUNT(*) FROM subscribers WHERE enabled = ?", (int(enabled),))
            (n,) = cur.fetchone()
            return int(n)
        finally:
            conn.close()

    def find_enabled(self) -> list[Subscriber]:
        """
        All enabled subscribers, in insertion order.

        One call is one snapshot; rows changed afterwards are not reflected
        in the returned list.
        """
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT * FROM subscribers WHERE enabled = 1 ORDER BY id ASC")
            return [self._row_to_subscriber(r) for r in cur.fetchall()]
        finally:
            conn.close()

    def list_subscribers(self, limit: int = 100) -> list[Subscriber]:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT * FROM subscribers ORDER BY id ASC LIMIT ?", (int(limit),))
            return [self._row_to_subscriber(r) for r in cur.fetchall()]
        finally:
            conn.close()

    def find_by_identity(self, identity: str) -> Subscriber | None:
        if not identity or not identity.strip():
            return None

        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT * FROM subscribers WHERE identity = ?", (identity.strip(),))
            row = cur.fetchone()
            return self._row_to_subscriber(row) if row else None
        finally:
            conn.close()

    def create(
        self,
        identity: str,
        *,
        enabled: bool = True,
        interval_minutes: int = DEFAULT_INTERVAL_MINUTES,
    ) -> Subscriber:
        """Insert a never-delivered subscriber. Raises DuplicateSubscriberError if present."""
        identity = validate_identity(identity)
        interval_minutes = validate_interval(interval_minutes)

        now = time.time()
        conn = self._get_conn()
        try:
            try:
                conn.execute(
                    """
                    INSERT INTO subscribers(
                        identity, enabled, interval_minutes, last_delivered_at,
                        created_at, updated_at
                    )
                    VALUES (?, ?, ?, NULL, ?, ?)
                    """,
                    (identity, int(bool(enabled)), interval_minutes, now, now),
                )
                conn.commit()
            except sqlite3.IntegrityError as e:
                raise DuplicateSubscriberError(f"subscriber already exists: {identity}") from e
        finally:
            conn.close()

        logger.debug(
            "Subscriber created identity=%s enabled=%s interval=%s",
            identity,
            enabled,
            interval_minutes,
        )
        return Subscriber(identity=identity, enabled=bool(enabled), interval_minutes=interval_minutes)

    def mark_delivered(self, identity: str, delivered_at: float) -> bool:
        """
        Stamp last_delivered_at and nothing else.

        The delivery loop works on a snapshot taken at the start of a pass;
        enabled/interval_minutes may have been changed by a command since then
        and must be left alone. The stamp never moves backwards.
        Returns False when no row exists for the identity.
        """
        ts = float(delivered_at)
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                UPDATE subscribers
                SET last_delivered_at = MAX(COALESCE(last_delivered_at, ?), ?),
                    updated_at = ?
                WHERE identity = ?
                """,
                (ts, ts, time.time(), identity.strip()),
            )
            conn.commit()
            return cur.rowcount == 1
        finally:
            conn.close()

    def save(self, subscriber: Subscriber) -> bool:
        """
        Persist the mutable fields of `subscriber` (command mutations).

        Returns False when no row exists for the identity.
        last_delivered_at is merged with MAX() so a stale snapshot can never
        move a stored timestamp backwards.
        """
        interval_minutes = validate_interval(subscriber.interval_minutes)
        last = subscriber.last_delivered_at

        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                UPDATE subscribers
                SET enabled = ?,
                    interval_minutes = ?,
                    last_delivered_at = CASE
                        WHEN ? IS NULL THEN last_delivered_at
                        WHEN last_delivered_at IS NULL THEN ?
                        ELSE MAX(last_delivered_at, ?)
                    END,
                    updated_at = ?
                WHERE identity = ?
                """,
                (
                    int(bool(subscriber.enabled)),
                    interval_minutes,
                    last,
                    last,
                    last,
                    time.time(),
                    subscriber.identity,
                ),
            )
            conn.commit()
            return cur.rowcount == 1
        finally:
            conn.close()
