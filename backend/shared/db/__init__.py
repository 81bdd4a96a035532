"""SQLite database layer: connection management and repository implementations."""

from shared.db.connection import Database
from shared.db.daily_summary_repository import SqliteDailySummaryRepository
from shared.db.game_repository import SqliteGameRepository
from shared.db.player_repository import SqlitePlayerRepository

__all__ = [
    "Database",
    "SqliteDailySummaryRepository",
    "SqliteGameRepository",
    "SqlitePlayerRepository",
]
