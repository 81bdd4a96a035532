"""
Leaderboard views over lifetime player statistics.

Every view drops players without results; the rate-based views also drop
players below a minimum round count. Ties on the metric fall back to player
id ascending so each view has one deterministic order.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from league.logic.types import LeaderboardEntry, LeaderboardView, PlayerStatistics

DEFAULT_MIN_GAMES = 5


@dataclass(frozen=True)
class _ViewSpec:
    metric: Callable[[PlayerStatistics], float]
    descending: bool
    needs_min_games: bool


_VIEW_SPECS: dict[LeaderboardView, _ViewSpec] = {
    LeaderboardView.COMBINED_SCORE: _ViewSpec(lambda s: s.combined_score, descending=True, needs_min_games=False),
    LeaderboardView.TOTAL_SCORE: _ViewSpec(lambda s: s.total_score, descending=True, needs_min_games=False),
    LeaderboardView.RANK_POINTS: _ViewSpec(lambda s: s.total_rank_points, descending=True, needs_min_games=False),
    LeaderboardView.AVERAGE_RANK: _ViewSpec(lambda s: s.average_rank, descending=False, needs_min_games=True),
    LeaderboardView.FIRST_PLACE_RATE: _ViewSpec(lambda s: s.first_place_rate, descending=True, needs_min_games=True),
    LeaderboardView.FOURTH_PLACE_RATE: _ViewSpec(lambda s: s.fourth_place_rate, descending=False, needs_min_games=True),
}


def build_leaderboard(
    view: LeaderboardView,
    stats: Iterable[PlayerStatistics],
    min_games: int = DEFAULT_MIN_GAMES,
) -> list[LeaderboardEntry]:
    """Sort statistics for one view and number the entries from 1."""
    spec = _VIEW_SPECS[view]
    threshold = max(min_games, 1) if spec.needs_min_games else 1
    eligible = [s for s in stats if s.games_played >= threshold]

    sign = -1 if spec.descending else 1
    eligible.sort(key=lambda s: (sign * spec.metric(s), s.player_id))

    return [
        LeaderboardEntry(
            position=position,
            player_id=s.player_id,
            player_name=s.player_name,
            games_played=s.games_played,
            value=spec.metric(s),
            stats=s,
        )
        for position, s in enumerate(eligible, start=1)
    ]


def build_leaderboards(
    stats: Iterable[PlayerStatistics],
    min_games: int = DEFAULT_MIN_GAMES,
) -> dict[LeaderboardView, list[LeaderboardEntry]]:
    """Build all six views from one statistics snapshot."""
    snapshot = list(stats)
    return {view: build_leaderboard(view, snapshot, min_games) for view in LeaderboardView}
