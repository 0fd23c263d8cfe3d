"""
SQLite database layer using aiosqlite.

Stores the last observed availability snapshot and user preferences.
Tables are created automatically on first connect.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path

import aiosqlite

from courtwatch.config import DB_PATH
from courtwatch.models import CanonicalSlot, StoredSlot, UserPreference

logger = logging.getLogger(__name__)

# ── Module-level connection ───────────────────────────────────────────────

_db: aiosqlite.Connection | None = None


async def init_db() -> None:
    """Open the database and create tables if they don't exist."""
    global _db
    db_path = Path(DB_PATH)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    _db = await aiosqlite.connect(str(db_path))
    _db.row_factory = aiosqlite.Row  # dict-like rows
    await _db.execute("PRAGMA journal_mode=WAL")

    await _db.executescript(_SCHEMA)
    await _db.commit()
    logger.info("Database initialized at %s", db_path)


async def close_db() -> None:
    """Close the database connection."""
    global _db
    if _db is not None:
        await _db.close()
        _db = None
        logger.info("Database connection closed")


def get_db() -> aiosqlite.Connection:
    """Return the active database connection (must call init_db first)."""
    if _db is None:
        raise RuntimeError("Database not initialized — call init_db() first")
    return _db


# ── Schema ────────────────────────────────────────────────────────────────

_SCHEMA = """
CREATE TABLE IF NOT EXISTS court_availability (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    date        TEXT NOT NULL,          -- YYYY-MM-DD
    time        TEXT NOT NULL,          -- HH:MM:SS
    location    TEXT NOT NULL,
    spaces      INTEGER NOT NULL,
    UNIQUE (date, time, location)
);

CREATE TABLE IF NOT EXISTS preferences (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    email       TEXT NOT NULL,
    date        TEXT NOT NULL,
    time        TEXT NOT NULL,          -- HH:MM or HH:MM:SS
    location    TEXT NOT NULL,
    created_at  TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_prefs_email ON preferences(email);
"""


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _row_to_slot(row: aiosqlite.Row) -> StoredSlot:
    return StoredSlot(
        date=row["date"],
        time=row["time"],
        location=row["location"],
        spaces=row["spaces"],
    )


def _row_to_preference(row: aiosqlite.Row) -> UserPreference:
    return UserPreference(
        id=row["id"],
        email=row["email"],
        date=row["date"],
        time=row["time"],
        location=row["location"],
        created_at=row["created_at"],
    )


# ══════════════════════════════════════════════════════════════════════════
#                    AVAILABILITY SNAPSHOT
# ══════════════════════════════════════════════════════════════════════════


async def list_snapshot() -> list[StoredSlot]:
    """Return every slot of the last persisted snapshot."""
    db = get_db()
    async with db.execute(
        "SELECT date, time, location, spaces FROM court_availability"
    ) as cur:
        rows = await cur.fetchall()
    return [_row_to_slot(r) for r in rows]


async def replace_snapshot(slots: Iterable[CanonicalSlot]) -> int:
    """
    Replace the whole snapshot with *slots* in one transaction.

    Returns the number of rows written. On error nothing is changed.
    """
    db = get_db()
    rows = [(s.date, s.time, s.location, s.spaces) for s in slots]
    try:
        await db.execute("DELETE FROM court_availability")
        await db.executemany(
            "INSERT INTO court_availability (date, time, location, spaces) VALUES (?, ?, ?, ?)",
            rows,
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    return len(rows)


# ══════════════════════════════════════════════════════════════════════════
#                    PREFERENCES
# ══════════════════════════════════════════════════════════════════════════


async def list_preferences() -> list[UserPreference]:
    """Return all stored preferences across all users."""
    db = get_db()
    async with db.execute("SELECT * FROM preferences ORDER BY id") as cur:
        rows = await cur.fetchall()
    return [_row_to_preference(r) for r in rows]


async def replace_preferences(email: str, preferences: Iterable[tuple[str, str, str]]) -> int:
    """
    Replace every preference of *email* with (date, time, location) triples.

    Returns the number of preferences stored.
    """
    db = get_db()
    now = _now_iso()
    rows = [(email, d, t, loc, now) for d, t, loc in preferences]
    try:
        await db.execute("DELETE FROM preferences WHERE email = ?", (email,))
        await db.executemany(
            "INSERT INTO preferences (email, date, time, location, created_at) VALUES (?, ?, ?, ?, ?)",
            rows,
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    return len(rows)
