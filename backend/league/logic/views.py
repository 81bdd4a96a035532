"""
Read views assembled from stored records: game list and detail, player
history, daily standings, and the dashboard summary.
"""

import math
from collections import defaultdict
from collections.abc import Mapping, Sequence
from datetime import date

from league.logic.rounds import group_by_round
from league.logic.types import (
    DailyStanding,
    Dashboard,
    GameDetail,
    GameListItem,
    GamePlayerTotal,
    HighScore,
    HistoryEntry,
    PlayerStatistics,
)
from shared.dal.models import DailySummary, Game, Player, RoundResult

DASHBOARD_TOP_PLAYERS = 5
UNKNOWN_PLAYER_NAME = "unknown"


def _name_of(names: Mapping[str, str], player_id: str) -> str:
    return names.get(player_id, UNKNOWN_PLAYER_NAME)


def build_game_detail(game: Game, results: Sequence[RoundResult], names: Mapping[str, str]) -> GameDetail:
    """Lay out a game round by round, with each roster player's totals across the game."""
    by_player: dict[str, list[RoundResult]] = defaultdict(list)
    for result in results:
        by_player[result.player_id].append(result)

    totals = [
        GamePlayerTotal(
            player_id=player_id,
            player_name=_name_of(names, player_id),
            total_score=sum(r.score for r in by_player[player_id]),
            total_points=sum(r.point for r in by_player[player_id]),
            first_place_count=sum(1 for r in by_player[player_id] if r.rank == 1),
        )
        for player_id in game.player_ids
    ]
    return GameDetail(game=game, rounds=list(group_by_round(results).values()), totals=totals)


def build_game_list(
    games: Sequence[Game],
    results: Sequence[RoundResult],
    names: Mapping[str, str],
) -> list[GameListItem]:
    round_numbers: dict[str, set[int]] = defaultdict(set)
    for result in results:
        round_numbers[result.game_id].add(result.round_number)
    return [
        GameListItem(
            game=game,
            player_names=[_name_of(names, player_id) for player_id in game.player_ids],
            num_rounds=len(round_numbers[game.game_id]),
        )
        for game in games
    ]


def build_history(results: Sequence[RoundResult], games: Mapping[str, Game]) -> list[HistoryEntry]:
    """Join a player's results with their games, newest date first, rounds in play order within a game."""
    entries = [
        HistoryEntry(date=games[r.game_id].date, venue=games[r.game_id].venue, result=r)
        for r in results
        if r.game_id in games
    ]
    entries.sort(key=lambda e: (e.result.round_number, e.result.game_id))
    entries.sort(key=lambda e: (e.date, games[e.result.game_id].created_at), reverse=True)
    return entries


def build_daily_standings(summaries: Sequence[DailySummary], names: Mapping[str, str]) -> list[DailyStanding]:
    ordered = sorted(summaries, key=lambda s: s.daily_rank)
    return [DailyStanding(player_name=_name_of(names, s.player_id), summary=s) for s in ordered]


def build_dashboard(
    *,
    games: Sequence[Game],
    players: Sequence[Player],
    results: Sequence[RoundResult],
    stats: Sequence[PlayerStatistics],
    today: date,
) -> Dashboard:
    """Summarize the whole league as of ``today``."""
    month_start = today.replace(day=1)
    names = {p.player_id: p.name for p in players}
    game_dates = {g.game_id: g.date for g in games}

    average_score = 0
    highest_score = None
    if results:
        # round half up, not banker's rounding
        average_score = math.floor(sum(r.score for r in results) / len(results) + 0.5)
        best = max(results, key=lambda r: r.score)
        highest_score = HighScore(
            score=best.score,
            player_name=_name_of(names, best.player_id),
            date=game_dates[best.game_id],
        )

    # every registered player competes here, including those yet to play
    top = sorted(stats, key=lambda s: (-s.total_score, s.player_id))[:DASHBOARD_TOP_PLAYERS]
    return Dashboard(
        total_games=len(games),
        games_this_month=sum(1 for g in games if g.date >= month_start),
        total_players=len(players),
        average_score=average_score,
        highest_score=highest_score,
        top_players=top,
    )
