"""SQLite database connection and schema management."""

import asyncio
import os
import sqlite3
from pathlib import Path

import structlog

logger = structlog.get_logger()

_DB_FILE_PERMISSIONS = 0o600

DEFAULT_TIMEOUT_SECONDS = 5.0

_SCHEMA_SQL = """\
CREATE TABLE IF NOT EXISTS players (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    created_at TEXT NOT NULL,
    data TEXT NOT NULL
);

CREATE UNIQUE INDEX IF NOT EXISTS idx_players_name
    ON players (name COLLATE NOCASE);

CREATE TABLE IF NOT EXISTS games (
    id TEXT PRIMARY KEY,
    date TEXT NOT NULL,
    created_at TEXT NOT NULL,
    data TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_games_date ON games (date);

CREATE TABLE IF NOT EXISTS round_results (
    game_id TEXT NOT NULL REFERENCES games (id) ON DELETE CASCADE,
    round_number INTEGER NOT NULL,
    player_id TEXT NOT NULL REFERENCES players (id),
    score INTEGER NOT NULL,
    rank INTEGER NOT NULL,
    point INTEGER NOT NULL,
    PRIMARY KEY (game_id, round_number, player_id)
);

CREATE INDEX IF NOT EXISTS idx_round_results_player ON round_results (player_id);

CREATE TABLE IF NOT EXISTS daily_summaries (
    date TEXT NOT NULL,
    player_id TEXT NOT NULL REFERENCES players (id),
    games_played INTEGER NOT NULL,
    total_score INTEGER NOT NULL,
    average_rank REAL NOT NULL,
    first_place_count INTEGER NOT NULL,
    daily_rank INTEGER NOT NULL,
    rank_point INTEGER NOT NULL,
    PRIMARY KEY (date, player_id)
);

CREATE INDEX IF NOT EXISTS idx_daily_summaries_player ON daily_summaries (player_id);
"""


class Database:
    """SQLite database wrapper with schema management.

    ``timeout`` bounds how long any statement waits on a locked database
    before failing, so no store operation blocks indefinitely. Every repository
    built on one Database serializes its writes through ``write_lock``.
    """

    def __init__(self, path: str | Path, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        self._path = str(path)
        self._timeout = timeout
        self._conn: sqlite3.Connection | None = None
        self._write_lock = asyncio.Lock()

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def write_lock(self) -> asyncio.Lock:
        return self._write_lock

    @property
    def connection(self) -> sqlite3.Connection:
        """Return the active connection or raise if disconnected."""
        if self._conn is None:
            raise RuntimeError("Database is not connected")
        return self._conn

    def connect(self) -> None:
        """Open the database, apply pragmas, create schema, and harden file permissions."""
        parent = Path(self._path).parent
        parent.mkdir(parents=True, exist_ok=True)

        self._conn = sqlite3.connect(self._path, timeout=self._timeout, check_same_thread=False)
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute("PRAGMA foreign_keys=ON")
        self._conn.execute(f"PRAGMA busy_timeout={int(self._timeout * 1000)}")
        self._conn.executescript(_SCHEMA_SQL)

        self._harden_permissions()
        logger.info("database connected", path=self._path)

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _harden_permissions(self) -> None:
        """Set owner-only file permissions on POSIX systems (best effort).

        Covers the WAL/SHM sibling files too, since they hold database content.
        """
        if os.name != "posix":  # pragma: no cover
            return
        for suffix in ("", "-wal", "-shm"):
            p = Path(self._path + suffix)
            if p.exists():
                try:
                    p.chmod(_DB_FILE_PERMISSIONS)
                except OSError:
                    logger.warning("could not set file permissions", permissions=oct(_DB_FILE_PERMISSIONS), path=str(p))
