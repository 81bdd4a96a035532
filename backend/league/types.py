from datetime import date
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from shared.dal.models import NUM_PLAYERS

# Far beyond any real table score, and small enough that a day's or a career's
# totals stay inside SQLite's 64-bit integers.
SCORE_LIMIT = 10**9

Score = Annotated[StrictInt, Field(ge=-SCORE_LIMIT, le=SCORE_LIMIT)]


class RegisterPlayerRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, max_length=64)


class SaveGameRequest(BaseModel):
    """A game as entered: date, optional venue, the four-player roster, and raw round scores."""

    model_config = ConfigDict(extra="forbid")

    date: date
    venue: str | None = None
    player_ids: list[str] = Field(min_length=NUM_PLAYERS, max_length=NUM_PLAYERS)
    rounds: list[dict[str, Score]]
