"""
Round aggregation: turn every round of a game into RoundResult records.

All rounds are validated before any result is produced, so a game with a
single bad round yields nothing and the caller never starts a write.
"""

from collections import defaultdict
from collections.abc import Mapping, Sequence

from league.logic.exceptions import IncompleteRoundError, InvalidRosterError, InvalidRoundError
from league.logic.ranking import rank_to_point, resolve_ranks
from shared.dal.models import NUM_PLAYERS, RoundResult


def validate_roster(roster: Sequence[str]) -> None:
    if len(roster) != NUM_PLAYERS or len(set(roster)) != NUM_PLAYERS:
        raise InvalidRosterError(f"a game needs exactly {NUM_PLAYERS} distinct players, got {list(roster)}")


def validate_rounds(roster: Sequence[str], rounds: Sequence[Mapping[str, int]]) -> None:
    """
    Check every round against the roster.

    Raise InvalidRoundError for an empty game or a round naming players outside
    the roster, and IncompleteRoundError for a round missing roster players.
    """
    validate_roster(roster)
    if not rounds:
        raise InvalidRoundError(None, "a game must contain at least one round")

    members = set(roster)
    for round_number, scores in enumerate(rounds, start=1):
        outsiders = set(scores) - members
        if outsiders:
            raise InvalidRoundError(round_number, f"players not on the roster: {', '.join(sorted(outsiders))}")
        missing = members - set(scores)
        if missing:
            raise IncompleteRoundError(round_number, missing)


def aggregate_rounds(
    game_id: str,
    roster: Sequence[str],
    rounds: Sequence[Mapping[str, int]],
) -> list[RoundResult]:
    """
    Build the complete result set for a game.

    Results are ordered by round number, then roster order, so the same input
    always produces an identical list.
    """
    validate_rounds(roster, rounds)

    results: list[RoundResult] = []
    for round_number, scores in enumerate(rounds, start=1):
        ranks = resolve_ranks(scores, round_number)
        results.extend(
            RoundResult(
                game_id=game_id,
                round_number=round_number,
                player_id=player_id,
                score=scores[player_id],
                rank=ranks[player_id],
                point=rank_to_point(ranks[player_id]),
            )
            for player_id in roster
        )
    return results


def group_by_round(results: Sequence[RoundResult]) -> dict[int, list[RoundResult]]:
    """Group one game's results by round number, in round order."""
    grouped: dict[int, list[RoundResult]] = defaultdict(list)
    for result in sorted(results, key=lambda r: r.round_number):
        grouped[result.round_number].append(result)
    return dict(grouped)


def rounds_from_results(results: Sequence[RoundResult]) -> list[dict[str, int]]:
    """Recover the raw per-round score maps of a game from its stored results."""
    return [{r.player_id: r.score for r in round_results} for round_results in group_by_round(results).values()]
