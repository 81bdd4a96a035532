"""
Daily rollup: per-player summaries and rank-point bonuses for one date.

Always a full recompute over every result played that date, since a change
to one game can move any other player's daily rank.
"""

from collections import defaultdict
from collections.abc import Iterable
from datetime import date

from shared.dal.models import DailySummary, RoundResult

# Bonus for the day's standing by total score. Ranks past 3 earn nothing.
RANK_POINT_TABLE: dict[int, int] = {1: 10, 2: 6, 3: 3}


def daily_rank_point(daily_rank: int) -> int:
    return RANK_POINT_TABLE.get(daily_rank, 0)


def rollup_day(day: date, results: Iterable[RoundResult]) -> list[DailySummary]:
    """
    Summarize every player who played on ``day``.

    Daily rank orders players by total score descending; equal totals are
    broken by player id ascending, so every player gets a distinct rank.
    Returns summaries in daily-rank order, or an empty list for a date with
    no results.
    """
    by_player: dict[str, list[RoundResult]] = defaultdict(list)
    for result in results:
        by_player[result.player_id].append(result)

    totals = {player_id: sum(r.score for r in player_results) for player_id, player_results in by_player.items()}
    standing = sorted(by_player, key=lambda player_id: (-totals[player_id], player_id))

    summaries = []
    for daily_rank, player_id in enumerate(standing, start=1):
        player_results = by_player[player_id]
        summaries.append(
            DailySummary(
                date=day,
                player_id=player_id,
                games_played=len(player_results),
                total_score=totals[player_id],
                average_rank=sum(r.rank for r in player_results) / len(player_results),
                first_place_count=sum(1 for r in player_results if r.rank == 1),
                daily_rank=daily_rank,
                rank_point=daily_rank_point(daily_rank),
            ),
        )
    return summaries
