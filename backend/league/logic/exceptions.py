"""Typed domain exceptions for league record violations.

Input rule violations use subclasses of LeagueRuleError rather than raw
ValueError, so the service boundary can reject a save before any write
and the HTTP layer can map the whole family to one response.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from shared.dal.errors import RecomputeFailedError

if TYPE_CHECKING:
    from collections.abc import Iterable

__all__ = [
    "DuplicatePlayerError",
    "GameNotFoundError",
    "IncompleteRoundError",
    "InvalidRosterError",
    "InvalidRoundError",
    "LeagueRuleError",
    "NotFoundError",
    "PlayerNotFoundError",
    "RecomputeFailedError",
]


class LeagueRuleError(Exception):
    """Base exception for submitted records that break league rules."""


class InvalidRoundError(LeagueRuleError):
    """A round's score map is not exactly the four roster players, or a game has no rounds.

    Attributes:
        round_number: 1-based index of the offending round, or None for game-level problems.
        reason: Human-readable explanation.

    """

    def __init__(self, round_number: int | None, reason: str) -> None:
        self.round_number = round_number
        self.reason = reason
        where = f"round {round_number}" if round_number is not None else "game"
        super().__init__(f"invalid {where}: {reason}")


class IncompleteRoundError(LeagueRuleError):
    """One or more roster players have no score in a round."""

    def __init__(self, round_number: int, missing: Iterable[str]) -> None:
        self.round_number = round_number
        self.missing = sorted(missing)
        super().__init__(f"round {round_number} is missing scores for: {', '.join(self.missing)}")


class InvalidRosterError(LeagueRuleError):
    """Roster is not four distinct registered players, or an edit tried to change it."""


class NotFoundError(Exception):
    """Requested record does not exist."""


class PlayerNotFoundError(NotFoundError):
    def __init__(self, player_id: str) -> None:
        self.player_id = player_id
        super().__init__(f"player {player_id} not found")


class GameNotFoundError(NotFoundError):
    def __init__(self, game_id: str) -> None:
        self.game_id = game_id
        super().__init__(f"game {game_id} not found")


class DuplicatePlayerError(Exception):
    """A player with the same name is already registered."""
