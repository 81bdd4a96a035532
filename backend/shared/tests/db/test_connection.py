"""Tests for Database connection and schema."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest

from shared.db.connection import Database

if TYPE_CHECKING:
    from pathlib import Path

EXPECTED_TABLES = {"players", "games", "round_results", "daily_summaries"}


def _table_names(db: Database) -> set[str]:
    rows = db.connection.execute("SELECT name FROM sqlite_master WHERE type='table'").fetchall()
    return {row[0] for row in rows}


class TestConnect:
    def test_creates_schema_and_connects(self, tmp_path: Path) -> None:
        db = Database(tmp_path / "test.db")
        db.connect()
        assert EXPECTED_TABLES <= _table_names(db)
        db.close()

    def test_reconnect_after_close(self, tmp_path: Path) -> None:
        db = Database(tmp_path / "test.db")
        db.connect()
        db.close()
        db.connect()
        assert EXPECTED_TABLES <= _table_names(db)
        db.close()

    def test_connection_raises_when_disconnected(self, tmp_path: Path) -> None:
        db = Database(tmp_path / "test.db")
        with pytest.raises(RuntimeError, match="not connected"):
            _ = db.connection

    def test_connection_raises_after_close(self, tmp_path: Path) -> None:
        db = Database(tmp_path / "test.db")
        db.connect()
        db.close()
        with pytest.raises(RuntimeError, match="not connected"):
            _ = db.connection

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        db = Database(tmp_path / "nested" / "dir" / "test.db")
        db.connect()
        assert db.connection is not None
        db.close()

    def test_busy_timeout_follows_configured_timeout(self, tmp_path: Path) -> None:
        db = Database(tmp_path / "test.db", timeout=2.5)
        db.connect()
        assert db.timeout == 2.5
        assert db.connection.execute("PRAGMA busy_timeout").fetchone()[0] == 2500
        db.close()

    def test_foreign_keys_enabled(self, tmp_path: Path) -> None:
        db = Database(tmp_path / "test.db")
        db.connect()
        assert db.connection.execute("PRAGMA foreign_keys").fetchone()[0] == 1
        db.close()


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions only")
class TestPermissions:
    def test_db_file_has_restricted_permissions(self, tmp_path: Path) -> None:
        db_path = tmp_path / "test.db"
        db = Database(db_path)
        db.connect()

        assert db_path.stat().st_mode & 0o777 == 0o600
        db.close()

    def test_harden_permissions_warns_on_failure(self, tmp_path: Path) -> None:
        """Permission hardening logs a warning on failure instead of raising."""
        db = Database(tmp_path / "test.db")
        with patch("pathlib.Path.chmod", side_effect=OSError("permission denied")):
            db.connect()
        assert db.connection is not None
        db.close()
