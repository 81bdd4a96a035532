"""Abstract interface for reading daily summaries."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import date

    from shared.dal.models import DailySummary


class DailySummaryRepository(ABC):
    """Read access to daily summaries.

    Summaries are only ever written by GameRepository as part of a game write.
    """

    @abstractmethod
    async def get_summaries(self, *, day: date | None = None, player_id: str | None = None) -> list[DailySummary]: ...

    @abstractmethod
    async def list_dates(self) -> list[date]: ...
