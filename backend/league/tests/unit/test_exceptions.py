from league.logic.exceptions import (
    GameNotFoundError,
    IncompleteRoundError,
    InvalidRosterError,
    InvalidRoundError,
    LeagueRuleError,
    NotFoundError,
    PlayerNotFoundError,
    RecomputeFailedError,
)
from shared.dal.errors import RecomputeFailedError as DalRecomputeFailedError


def test_rule_errors_share_a_base():
    assert issubclass(InvalidRoundError, LeagueRuleError)
    assert issubclass(IncompleteRoundError, LeagueRuleError)
    assert issubclass(InvalidRosterError, LeagueRuleError)


def test_invalid_round_message():
    assert str(InvalidRoundError(3, "expected 4 scores, got 5")) == "invalid round 3: expected 4 scores, got 5"
    assert str(InvalidRoundError(None, "no rounds")) == "invalid game: no rounds"


def test_incomplete_round_sorts_missing():
    err = IncompleteRoundError(2, {"d", "b"})
    assert err.missing == ["b", "d"]
    assert str(err) == "round 2 is missing scores for: b, d"


def test_not_found_errors():
    assert isinstance(PlayerNotFoundError("p1"), NotFoundError)
    assert str(GameNotFoundError("g1")) == "game g1 not found"


def test_recompute_failed_is_reexported():
    assert RecomputeFailedError is DalRecomputeFailedError
    err = RecomputeFailedError(game_id="g1", days=[], reason="boom")
    assert err.days == []
    assert "g1" in str(err)
