"""League server configuration via environment variables."""

import json
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode


def parse_string_list(value: str | list[str]) -> list[str]:
    """Parse a string list given as a list, a JSON array string, or a comma-separated string."""
    if isinstance(value, list):
        return value

    stripped = value.strip()
    if stripped.startswith("["):
        try:
            parsed = json.loads(stripped)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON array: {e}") from e
        if not isinstance(parsed, list) or not all(isinstance(item, str) for item in parsed):
            raise ValueError("JSON value must be an array of strings")
        return parsed

    return [item.strip() for item in stripped.split(",") if item.strip()]


class LeagueServerSettings(BaseSettings):
    model_config = {"env_prefix": "LEAGUE_"}

    database_path: str = "backend/league.db"
    # Upper bound on waits for the database lock and the in-process writer lock.
    db_timeout_seconds: float = Field(default=5.0, gt=0)
    leaderboard_min_games: int = Field(default=5, ge=1)
    log_dir: str | None = "backend/logs/league"
    cors_origins: Annotated[list[str], NoDecode] = []

    @field_validator("cors_origins", mode="before")
    @classmethod
    def validate_cors_origins(cls, v: str | list[str]) -> list[str]:
        return parse_string_list(v)
