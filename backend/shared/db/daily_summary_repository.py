"""SQLite-backed daily summary reader."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from shared.dal.daily_summary_repository import DailySummaryRepository
from shared.dal.models import DailySummary

if TYPE_CHECKING:
    from shared.db.connection import Database

_COLUMNS = "date, player_id, games_played, total_score, average_rank, first_place_count, daily_rank, rank_point"


class SqliteDailySummaryRepository(DailySummaryRepository):
    """SQLite implementation of DailySummaryRepository."""

    def __init__(self, db: Database) -> None:
        self._db = db

    async def get_summaries(self, *, day: date | None = None, player_id: str | None = None) -> list[DailySummary]:
        """Return summaries matching every given filter, ordered by date then daily rank."""
        clauses: list[str] = []
        params: list[str] = []
        if day is not None:
            clauses.append("date = ?")
            params.append(day.isoformat())
        if player_id is not None:
            clauses.append("player_id = ?")
            params.append(player_id)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        rows = self._db.connection.execute(
            f"SELECT {_COLUMNS} FROM daily_summaries {where} ORDER BY date, daily_rank",  # noqa: S608
            params,
        ).fetchall()
        return [
            DailySummary(
                date=date.fromisoformat(row[0]),
                player_id=row[1],
                games_played=row[2],
                total_score=row[3],
                average_rank=row[4],
                first_place_count=row[5],
                daily_rank=row[6],
                rank_point=row[7],
            )
            for row in rows
        ]

    async def list_dates(self) -> list[date]:
        """Return every date with at least one summary, newest first."""
        rows = self._db.connection.execute(
            "SELECT DISTINCT date FROM daily_summaries ORDER BY date DESC",
        ).fetchall()
        return [date.fromisoformat(row[0]) for row in rows]
