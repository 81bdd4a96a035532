"""Shared fixtures for league tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from league.service import LeagueService
from shared.db import Database, SqliteDailySummaryRepository, SqliteGameRepository, SqlitePlayerRepository

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def db(tmp_path: Path):
    database = Database(tmp_path / "league.db", timeout=0.5)
    database.connect()
    yield database
    database.close()


@pytest.fixture
def service(db: Database) -> LeagueService:
    return LeagueService(
        SqlitePlayerRepository(db),
        SqliteGameRepository(db),
        SqliteDailySummaryRepository(db),
        min_games=2,
    )
