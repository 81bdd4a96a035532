"""
Rank and point conversion for a single round.

Ranks use competition ranking: a player's rank is one plus the number of
players with a strictly greater score, so ties share the better rank and
the following rank is skipped (30000/30000/20000/20000 -> 1/1/3/3).
"""

from collections.abc import Mapping

import structlog

from league.logic.exceptions import InvalidRoundError
from shared.dal.models import NUM_PLAYERS

logger = structlog.get_logger()

# Fixed uma table. Assumes a strict 1-2-3-4 order; tied rounds are not zero-sum.
POINT_TABLE: dict[int, int] = {1: 12, 2: 4, 3: -4, 4: -12}


def resolve_ranks(scores: Mapping[str, int], round_number: int | None = None) -> dict[str, int]:
    """
    Assign a rank in 1..4 to each of the four players of a round.

    Raise InvalidRoundError when the round does not hold exactly four players.
    """
    if len(scores) != NUM_PLAYERS:
        raise InvalidRoundError(round_number, f"expected {NUM_PLAYERS} scores, got {len(scores)}")

    ordered = sorted(scores.items(), key=lambda item: item[1], reverse=True)
    ranks: dict[str, int] = {}
    previous_score: int | None = None
    current_rank = 1
    for position, (player_id, score) in enumerate(ordered, start=1):
        if score != previous_score:
            current_rank = position
        ranks[player_id] = current_rank
        previous_score = score
    return ranks


def rank_to_point(rank: int) -> int:
    """Map a rank to its point value; out-of-range ranks score 0 and are logged."""
    point = POINT_TABLE.get(rank)
    if point is None:
        logger.error("invariant violation: rank outside point table", rank=rank)
        return 0
    return point
