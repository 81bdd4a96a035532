"""SQLite-backed player repository."""

from __future__ import annotations

import json
import sqlite3
from typing import TYPE_CHECKING

import structlog

from shared.dal.models import Player
from shared.dal.player_repository import PlayerRepository

if TYPE_CHECKING:
    from shared.db.connection import Database

logger = structlog.get_logger()


class SqlitePlayerRepository(PlayerRepository):
    """SQLite implementation of PlayerRepository.

    Relies on database uniqueness constraints and maps IntegrityError
    to domain ValueError.
    """

    def __init__(self, db: Database) -> None:
        self._db = db

    async def create_player(self, player: Player) -> None:
        """Insert a player. Raises ValueError on duplicate id or name."""
        async with self._db.write_lock:
            try:
                self._db.connection.execute(
                    "INSERT INTO players (id, name, created_at, data) VALUES (?, ?, ?, ?)",
                    (
                        player.player_id,
                        player.name,
                        player.created_at.isoformat(),
                        player.model_dump_json(),
                    ),
                )
                self._db.connection.commit()
            except sqlite3.IntegrityError as exc:
                self._db.connection.rollback()
                error_msg = str(exc).lower()
                if "players.id" in error_msg:
                    raise ValueError(f"Player with id '{player.player_id}' already exists") from exc
                if "players.name" in error_msg or "idx_players_name" in error_msg:
                    raise ValueError(f"Name '{player.name}' already taken") from exc
                raise ValueError(str(exc)) from exc  # pragma: no cover
        logger.info("player registered", player_id=player.player_id, name=player.name)

    async def get_player(self, player_id: str) -> Player | None:
        row = self._db.connection.execute(
            "SELECT data FROM players WHERE id = ?",
            (player_id,),
        ).fetchone()
        if row is None:
            return None
        return Player.model_validate(json.loads(row[0]))

    async def list_players(self) -> list[Player]:
        """Return every registered player in registration order."""
        rows = self._db.connection.execute(
            "SELECT data FROM players ORDER BY created_at, id",
        ).fetchall()
        return [Player.model_validate(json.loads(row[0])) for row in rows]
