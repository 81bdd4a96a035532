"""League service: record games and players, and serve statistics views.

Writes validate everything up front, compute the full result set, then hand
it to the game repository, which replaces the game's results and recomputes
the affected daily summaries in one transaction. Reads take a snapshot of
the stored records and rebuild every derived view from scratch.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog

from league.logic.daily import rollup_day
from league.logic.exceptions import (
    DuplicatePlayerError,
    GameNotFoundError,
    InvalidRosterError,
    PlayerNotFoundError,
)
from league.logic.leaderboard import DEFAULT_MIN_GAMES, build_leaderboard, build_leaderboards
from league.logic.rounds import aggregate_rounds, validate_roster
from league.logic.stats import compute_all_statistics, compute_player_statistics
from league.logic.views import (
    build_daily_standings,
    build_dashboard,
    build_game_detail,
    build_game_list,
    build_history,
)
from shared.dal.models import Game, Player

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import date

    from league.logic.types import (
        DailyStanding,
        Dashboard,
        GameDetail,
        GameListItem,
        HistoryEntry,
        LeaderboardEntry,
        LeaderboardView,
        PlayerStatistics,
    )
    from league.types import SaveGameRequest
    from shared.dal import DailySummaryRepository, GameRepository, PlayerRepository

logger = structlog.get_logger()


class LeagueService:
    def __init__(
        self,
        players: PlayerRepository,
        games: GameRepository,
        summaries: DailySummaryRepository,
        *,
        min_games: int = DEFAULT_MIN_GAMES,
    ) -> None:
        self._players = players
        self._games = games
        self._summaries = summaries
        self._min_games = min_games

    async def register_player(self, name: str) -> Player:
        player = Player(player_id=uuid.uuid4().hex, name=name)
        try:
            await self._players.create_player(player)
        except ValueError as exc:
            raise DuplicatePlayerError(str(exc)) from exc
        return player

    async def get_player(self, player_id: str) -> Player:
        player = await self._players.get_player(player_id)
        if player is None:
            raise PlayerNotFoundError(player_id)
        return player

    async def list_players(self) -> list[Player]:
        return await self._players.list_players()

    async def create_game(self, request: SaveGameRequest) -> Game:
        """Validate and store a new game with all of its round results."""
        roster = list(request.player_ids)
        await self._check_roster_registered(roster)
        game_id = uuid.uuid4().hex
        results = aggregate_rounds(game_id, roster, request.rounds)

        game = Game(game_id=game_id, date=request.date, venue=request.venue, player_ids=tuple(roster))
        await self._games.replace_game(game, results, rollup_day)
        logger.info("game created", game_id=game_id, date=game.date, num_rounds=len(request.rounds))
        return game

    async def update_game(self, game_id: str, request: SaveGameRequest) -> Game:
        """Replace an existing game's date, venue and rounds. The roster cannot change."""
        existing = await self.get_game(game_id)
        if set(request.player_ids) != set(existing.player_ids):
            raise InvalidRosterError(f"roster of game {game_id} is fixed: {list(existing.player_ids)}")
        results = aggregate_rounds(game_id, existing.player_ids, request.rounds)

        game = Game(
            game_id=game_id,
            date=request.date,
            venue=request.venue,
            player_ids=existing.player_ids,
            created_at=existing.created_at,
        )
        await self._games.replace_game(game, results, rollup_day)
        logger.info("game updated", game_id=game_id, date=game.date, previous_date=existing.date)
        return game

    async def delete_game(self, game_id: str) -> Game:
        game = await self._games.delete_game(game_id, rollup_day)
        if game is None:
            raise GameNotFoundError(game_id)
        return game

    async def get_game(self, game_id: str) -> Game:
        game = await self._games.get_game(game_id)
        if game is None:
            raise GameNotFoundError(game_id)
        return game

    async def get_game_detail(self, game_id: str) -> GameDetail:
        game = await self.get_game(game_id)
        results = await self._games.get_results(game_id=game_id)
        return build_game_detail(game, results, await self._player_names())

    async def list_games(self) -> list[GameListItem]:
        games = await self._games.list_games()
        results = await self._games.get_results()
        return build_game_list(games, results, await self._player_names())

    async def get_player_statistics(self, player_id: str) -> PlayerStatistics:
        player = await self.get_player(player_id)
        results = await self._games.get_results(player_id=player_id)
        summaries = await self._summaries.get_summaries(player_id=player_id)
        return compute_player_statistics(player, results, summaries)

    async def list_player_statistics(self) -> list[PlayerStatistics]:
        """Statistics for every registered player, including those with no rounds yet."""
        players = await self._players.list_players()
        results = await self._games.get_results()
        summaries = await self._summaries.get_summaries()
        return compute_all_statistics(players, results, summaries)

    async def get_leaderboards(self) -> dict[LeaderboardView, list[LeaderboardEntry]]:
        return build_leaderboards(await self.list_player_statistics(), self._min_games)

    async def get_leaderboard(self, view: LeaderboardView) -> list[LeaderboardEntry]:
        return build_leaderboard(view, await self.list_player_statistics(), self._min_games)

    async def get_player_history(self, player_id: str) -> list[HistoryEntry]:
        await self.get_player(player_id)
        results = await self._games.get_results(player_id=player_id)
        games = {g.game_id: g for g in await self._games.list_games()}
        return build_history(results, games)

    async def get_daily_standings(self, day: date) -> list[DailyStanding]:
        summaries = await self._summaries.get_summaries(day=day)
        return build_daily_standings(summaries, await self._player_names())

    async def list_days(self) -> list[date]:
        return await self._summaries.list_dates()

    async def get_dashboard(self, today: date | None = None) -> Dashboard:
        if today is None:
            today = datetime.now(tz=UTC).date()
        players = await self._players.list_players()
        games = await self._games.list_games()
        results = await self._games.get_results()
        summaries = await self._summaries.get_summaries()
        stats = compute_all_statistics(players, results, summaries)
        return build_dashboard(games=games, players=players, results=results, stats=stats, today=today)

    async def _player_names(self) -> dict[str, str]:
        return {p.player_id: p.name for p in await self._players.list_players()}

    async def _check_roster_registered(self, roster: Sequence[str]) -> None:
        validate_roster(roster)
        unknown = [player_id for player_id in roster if await self._players.get_player(player_id) is None]
        if unknown:
            raise InvalidRosterError(f"unregistered players: {', '.join(unknown)}")
