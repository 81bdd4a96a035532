"""
Pydantic models for derived league views.

None of these are persisted; they are rebuilt from a snapshot of stored
records on every read.
"""

from datetime import date
from enum import StrEnum

from pydantic import BaseModel

from shared.dal.models import DailySummary, Game, RoundResult


class PlayerStatistics(BaseModel, frozen=True):
    player_id: str
    player_name: str
    games_played: int = 0  # rounds played
    total_score: int = 0
    average_score: float = 0.0
    average_rank: float = 0.0
    first_place_count: int = 0
    fourth_place_count: int = 0
    first_place_rate: float = 0.0  # percent
    fourth_place_rate: float = 0.0  # percent
    total_points: int = 0  # sum of per-round points
    total_rank_points: int = 0  # sum of daily rank-point bonuses
    combined_score: int = 0


class LeaderboardView(StrEnum):
    COMBINED_SCORE = "combined_score"
    TOTAL_SCORE = "total_score"
    RANK_POINTS = "rank_points"
    AVERAGE_RANK = "average_rank"
    FIRST_PLACE_RATE = "first_place_rate"
    FOURTH_PLACE_RATE = "fourth_place_rate"


class LeaderboardEntry(BaseModel, frozen=True):
    position: int
    player_id: str
    player_name: str
    games_played: int
    value: float
    stats: PlayerStatistics


class GamePlayerTotal(BaseModel, frozen=True):
    """One roster player's totals across every round of a game."""

    player_id: str
    player_name: str
    total_score: int
    total_points: int
    first_place_count: int


class GameDetail(BaseModel, frozen=True):
    game: Game
    rounds: list[list[RoundResult]]
    totals: list[GamePlayerTotal]


class GameListItem(BaseModel, frozen=True):
    game: Game
    player_names: list[str]
    num_rounds: int


class HistoryEntry(BaseModel, frozen=True):
    """A player's round result joined with the game it belongs to."""

    date: date
    venue: str | None
    result: RoundResult


class DailyStanding(BaseModel, frozen=True):
    player_name: str
    summary: DailySummary


class HighScore(BaseModel, frozen=True):
    score: int
    player_name: str
    date: date


class Dashboard(BaseModel, frozen=True):
    total_games: int
    games_this_month: int
    total_players: int
    average_score: int
    highest_score: HighScore | None
    top_players: list[PlayerStatistics]
