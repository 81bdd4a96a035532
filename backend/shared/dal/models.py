"""Persistence models for the data access layer."""

from datetime import UTC, date, datetime
from typing import Self

from pydantic import BaseModel, Field, field_validator, model_validator

NUM_PLAYERS = 4


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class Player(BaseModel, frozen=True):
    """Registered league member. Never modified or deleted once created."""

    player_id: str
    name: str = Field(min_length=1, max_length=64)
    created_at: datetime = Field(default_factory=_utcnow)

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v


class Game(BaseModel, frozen=True):
    """One dated sitting bound to a fixed four-player roster."""

    game_id: str
    date: date
    venue: str | None = None
    player_ids: tuple[str, ...]  # roster in seat/entry order, fixed at creation
    created_at: datetime = Field(default_factory=_utcnow)

    @field_validator("venue", mode="before")
    @classmethod
    def _blank_venue_is_none(cls, v: object) -> object:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @model_validator(mode="after")
    def _validate_roster(self) -> Self:
        if len(self.player_ids) != NUM_PLAYERS or len(set(self.player_ids)) != NUM_PLAYERS:
            raise ValueError(f"Game roster must hold exactly {NUM_PLAYERS} distinct players")
        return self


class RoundResult(BaseModel, frozen=True):
    """Derived outcome of one player in one round (hanso) of a game."""

    game_id: str
    round_number: int = Field(ge=1)
    player_id: str
    score: int
    rank: int
    point: int


class DailySummary(BaseModel, frozen=True):
    """Per-player rollup of every round played on one calendar date."""

    date: date
    player_id: str
    games_played: int  # rounds played that day
    total_score: int
    average_rank: float
    first_place_count: int
    daily_rank: int
    rank_point: int
