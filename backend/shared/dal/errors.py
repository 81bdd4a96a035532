"""Storage-level failures surfaced to the service layer."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import date


class RecomputeFailedError(Exception):
    """A game write or its daily recompute failed partway and was rolled back.

    The previously committed results and summaries are left untouched.

    Attributes:
        game_id: The game whose write failed.
        days: The dates whose summaries were being recomputed.
        reason: Human-readable description of the underlying failure.

    """

    def __init__(self, *, game_id: str, days: Iterable[date], reason: str) -> None:
        self.game_id = game_id
        self.days = sorted(days)
        self.reason = reason
        day_list = ", ".join(d.isoformat() for d in self.days)
        super().__init__(f"recompute failed for game {game_id} ({day_list}): {reason}")
