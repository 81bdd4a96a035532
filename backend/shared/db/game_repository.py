"""SQLite-backed game repository."""

from __future__ import annotations

import asyncio
import contextlib
import json
from datetime import date
from typing import TYPE_CHECKING

import structlog

from shared.dal.errors import RecomputeFailedError
from shared.dal.game_repository import GameRepository
from shared.dal.models import Game, RoundResult

if TYPE_CHECKING:
    import sqlite3
    from collections.abc import AsyncGenerator, Iterable

    from shared.dal.game_repository import DailyRollup
    from shared.dal.models import DailySummary
    from shared.db.connection import Database

logger = structlog.get_logger()

_RESULT_COLUMNS = "r.game_id, r.round_number, r.player_id, r.score, r.rank, r.point"


def _row_to_result(row: tuple) -> RoundResult:
    game_id, round_number, player_id, score, rank, point = row
    return RoundResult(
        game_id=game_id,
        round_number=round_number,
        player_id=player_id,
        score=score,
        rank=rank,
        point=point,
    )


class SqliteGameRepository(GameRepository):
    """SQLite implementation of GameRepository.

    Games are stored as JSON snapshots with indexed date columns; round results
    and daily summaries are plain columnar rows. Every write runs as a single
    IMMEDIATE transaction covering the game, its results and the daily summaries
    of each affected date, so readers see either the old or the new state.
    """

    def __init__(self, db: Database) -> None:
        self._db = db

    @contextlib.asynccontextmanager
    async def _write_lock(self, game_id: str, days: Iterable[date]) -> AsyncGenerator[None]:
        """Serialize writers, giving up after the database timeout."""
        lock = self._db.write_lock
        try:
            async with asyncio.timeout(self._db.timeout):
                await lock.acquire()
        except TimeoutError as exc:
            raise RecomputeFailedError(game_id=game_id, days=days, reason="timed out waiting for writer lock") from exc
        try:
            yield
        finally:
            lock.release()

    async def get_game(self, game_id: str) -> Game | None:
        """Retrieve a single game by its id."""
        return self._load_game(self._db.connection, game_id)

    async def list_games(self) -> list[Game]:
        """Return all games, newest date first, then newest created first."""
        rows = self._db.connection.execute(
            "SELECT data FROM games ORDER BY date DESC, created_at DESC",
        ).fetchall()
        return [Game.model_validate(json.loads(row[0])) for row in rows]

    async def get_results(
        self,
        *,
        game_id: str | None = None,
        player_id: str | None = None,
        day: date | None = None,
    ) -> list[RoundResult]:
        """Return round results matching every given filter.

        Ordered by game date, game creation time, round number, then player id.
        """
        clauses: list[str] = []
        params: list[str] = []
        if game_id is not None:
            clauses.append("r.game_id = ?")
            params.append(game_id)
        if player_id is not None:
            clauses.append("r.player_id = ?")
            params.append(player_id)
        if day is not None:
            clauses.append("g.date = ?")
            params.append(day.isoformat())
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        rows = self._db.connection.execute(
            f"SELECT {_RESULT_COLUMNS} FROM round_results r JOIN games g ON g.id = r.game_id "  # noqa: S608
            f"{where} ORDER BY g.date, g.created_at, r.game_id, r.round_number, r.player_id",
            params,
        ).fetchall()
        return [_row_to_result(row) for row in rows]

    async def replace_game(self, game: Game, results: list[RoundResult], rollup: DailyRollup) -> None:
        """Insert or overwrite a game, replacing all of its results as one unit.

        The daily summaries of the game's date, and of its previous date when an
        edit moved it, are recomputed inside the same transaction. The previous
        date is read after the transaction starts, so a concurrent writer on the
        same file cannot leave a stale date behind.
        """
        days = {game.date}
        async with self._write_lock(game.game_id, days):
            conn = self._db.connection
            try:
                conn.execute("BEGIN IMMEDIATE")
                previous = self._load_game(conn, game.game_id)
                if previous is not None:
                    days.add(previous.date)
                conn.execute("DELETE FROM round_results WHERE game_id = ?", (game.game_id,))
                conn.execute(
                    "INSERT INTO games (id, date, created_at, data) VALUES (?, ?, ?, ?) "
                    "ON CONFLICT (id) DO UPDATE SET date = excluded.date, data = excluded.data",
                    (game.game_id, game.date.isoformat(), game.created_at.isoformat(), game.model_dump_json()),
                )
                conn.executemany(
                    "INSERT INTO round_results (game_id, round_number, player_id, score, rank, point) "
                    "VALUES (?, ?, ?, ?, ?, ?)",
                    [(r.game_id, r.round_number, r.player_id, r.score, r.rank, r.point) for r in results],
                )
                for day in sorted(days):
                    self._recompute_day(conn, day, rollup)
                conn.commit()
            except Exception as exc:
                conn.rollback()
                logger.exception("game replace rolled back", game_id=game.game_id, days=sorted(days))
                raise RecomputeFailedError(game_id=game.game_id, days=days, reason=str(exc)) from exc
        logger.info("game saved", game_id=game.game_id, date=game.date, num_results=len(results))

    async def delete_game(self, game_id: str, rollup: DailyRollup) -> Game | None:
        """Delete a game and its results, then recompute its date.

        Returns the deleted game, or None when no such game exists.
        """
        days: list[date] = []
        async with self._write_lock(game_id, days):
            conn = self._db.connection
            try:
                conn.execute("BEGIN IMMEDIATE")
                game = self._load_game(conn, game_id)
                if game is None:
                    conn.rollback()
                    return None
                days.append(game.date)
                conn.execute("DELETE FROM round_results WHERE game_id = ?", (game_id,))
                conn.execute("DELETE FROM games WHERE id = ?", (game_id,))
                self._recompute_day(conn, game.date, rollup)
                conn.commit()
            except Exception as exc:
                conn.rollback()
                logger.exception("game delete rolled back", game_id=game_id, days=days)
                raise RecomputeFailedError(game_id=game_id, days=days, reason=str(exc)) from exc
        logger.info("game deleted", game_id=game_id, date=game.date)
        return game

    @staticmethod
    def _load_game(conn: sqlite3.Connection, game_id: str) -> Game | None:
        row = conn.execute("SELECT data FROM games WHERE id = ?", (game_id,)).fetchone()
        if row is None:
            return None
        return Game.model_validate(json.loads(row[0]))

    @staticmethod
    def _recompute_day(conn: sqlite3.Connection, day: date, rollup: DailyRollup) -> None:
        """Rebuild every summary of ``day`` from the results visible in the open transaction."""
        rows = conn.execute(
            f"SELECT {_RESULT_COLUMNS} FROM round_results r JOIN games g ON g.id = r.game_id "  # noqa: S608
            "WHERE g.date = ? ORDER BY r.game_id, r.round_number, r.player_id",
            (day.isoformat(),),
        ).fetchall()
        summaries: list[DailySummary] = rollup(day, [_row_to_result(row) for row in rows])
        conn.execute("DELETE FROM daily_summaries WHERE date = ?", (day.isoformat(),))
        conn.executemany(
            "INSERT INTO daily_summaries "
            "(date, player_id, games_played, total_score, average_rank, first_place_count, daily_rank, rank_point) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            [
                (
                    s.date.isoformat(),
                    s.player_id,
                    s.games_played,
                    s.total_score,
                    s.average_rank,
                    s.first_place_count,
                    s.daily_rank,
                    s.rank_point,
                )
                for s in summaries
            ],
        )
        logger.debug("daily summaries recomputed", date=day, num_players=len(summaries))
