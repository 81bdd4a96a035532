"""Abstract interface for game and round result persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import date

    from shared.dal.models import DailySummary, Game, RoundResult

    # Full recompute of one date's summaries from every result played that date.
    DailyRollup = Callable[[date, list[RoundResult]], list[DailySummary]]


class GameRepository(ABC):
    """Abstract interface for games, their round results, and the daily rollups they feed.

    Writes that touch a game's results must also recompute the daily summaries
    of every affected date, and both must become visible to readers together.
    """

    @abstractmethod
    async def get_game(self, game_id: str) -> Game | None: ...

    @abstractmethod
    async def list_games(self) -> list[Game]: ...

    @abstractmethod
    async def get_results(
        self,
        *,
        game_id: str | None = None,
        player_id: str | None = None,
        day: date | None = None,
    ) -> list[RoundResult]: ...

    @abstractmethod
    async def replace_game(self, game: Game, results: list[RoundResult], rollup: DailyRollup) -> None: ...

    @abstractmethod
    async def delete_game(self, game_id: str, rollup: DailyRollup) -> Game | None: ...
