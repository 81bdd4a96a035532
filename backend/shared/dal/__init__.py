"""Data access layer: repository interfaces and shared persistence models."""

from shared.dal.daily_summary_repository import DailySummaryRepository
from shared.dal.game_repository import GameRepository
from shared.dal.models import DailySummary, Game, Player, RoundResult
from shared.dal.player_repository import PlayerRepository

__all__ = [
    "DailySummary",
    "DailySummaryRepository",
    "Game",
    "GameRepository",
    "Player",
    "PlayerRepository",
    "RoundResult",
]
