"""
Lifetime player statistics computed from stored results and daily summaries.

Stateless: every call rescans the records it is given. A player without
results gets all-zero statistics rather than NaN or a division error.
"""

from collections import defaultdict
from collections.abc import Iterable, Sequence

from league.logic.types import PlayerStatistics
from shared.dal.models import DailySummary, Player, RoundResult

LAST_PLACE = 4


def _percent(count: int, total: int) -> float:
    return count / total * 100 if total else 0.0


def compute_player_statistics(
    player: Player,
    results: Sequence[RoundResult],
    summaries: Iterable[DailySummary],
) -> PlayerStatistics:
    """Aggregate one player's results and daily summaries into lifetime statistics."""
    games_played = len(results)
    if games_played == 0:
        return PlayerStatistics(player_id=player.player_id, player_name=player.name)

    total_score = sum(r.score for r in results)
    first_place_count = sum(1 for r in results if r.rank == 1)
    fourth_place_count = sum(1 for r in results if r.rank == LAST_PLACE)
    total_rank_points = sum(s.rank_point for s in summaries)

    return PlayerStatistics(
        player_id=player.player_id,
        player_name=player.name,
        games_played=games_played,
        total_score=total_score,
        average_score=total_score / games_played,
        average_rank=sum(r.rank for r in results) / games_played,
        first_place_count=first_place_count,
        fourth_place_count=fourth_place_count,
        first_place_rate=_percent(first_place_count, games_played),
        fourth_place_rate=_percent(fourth_place_count, games_played),
        total_points=sum(r.point for r in results),
        total_rank_points=total_rank_points,
        combined_score=total_score + total_rank_points,
    )


def compute_all_statistics(
    players: Iterable[Player],
    results: Iterable[RoundResult],
    summaries: Iterable[DailySummary],
) -> list[PlayerStatistics]:
    """Compute statistics for every player from one snapshot of all records.

    Returned in the order players were given; players without results are included.
    """
    results_by_player: dict[str, list[RoundResult]] = defaultdict(list)
    for result in results:
        results_by_player[result.player_id].append(result)
    summaries_by_player: dict[str, list[DailySummary]] = defaultdict(list)
    for summary in summaries:
        summaries_by_player[summary.player_id].append(summary)

    return [
        compute_player_statistics(player, results_by_player[player.player_id], summaries_by_player[player.player_id])
        for player in players
    ]
