"""
Unit tests for read views: game detail and list, history, daily standings, dashboard.
"""

from datetime import UTC, date, datetime

from league.logic.daily import rollup_day
from league.logic.rounds import aggregate_rounds
from league.logic.stats import compute_all_statistics
from league.logic.views import (
    UNKNOWN_PLAYER_NAME,
    build_daily_standings,
    build_dashboard,
    build_game_detail,
    build_game_list,
    build_history,
)
from shared.dal.models import Game, Player

ROSTER = ("a", "b", "c", "d")
NAMES = {"a": "Aki", "b": "Ben", "c": "Chie", "d": "Dai"}


def _game(game_id: str, day: date, hour: int = 12, venue: str | None = None) -> Game:
    return Game(
        game_id=game_id,
        date=day,
        venue=venue,
        player_ids=ROSTER,
        created_at=datetime(2025, 1, 1, hour, tzinfo=UTC),
    )


def _results(game_id: str, *rounds: tuple[int, int, int, int]):
    return aggregate_rounds(game_id, ROSTER, [dict(zip(ROSTER, scores, strict=True)) for scores in rounds])


class TestGameDetail:
    def test_rounds_and_totals(self):
        game = _game("g1", date(2025, 1, 4))
        results = _results("g1", (40000, 30000, 20000, 10000), (10000, 40000, 30000, 20000))

        detail = build_game_detail(game, results, NAMES)

        assert len(detail.rounds) == 2
        assert [r.player_id for r in detail.rounds[0]] == list(ROSTER)
        a = detail.totals[0]
        assert (a.player_id, a.player_name, a.total_score, a.total_points, a.first_place_count) == (
            "a",
            "Aki",
            50000,
            0,
            1,
        )
        assert [t.player_id for t in detail.totals] == list(ROSTER)

    def test_missing_name_falls_back(self):
        detail = build_game_detail(_game("g1", date(2025, 1, 4)), [], {})
        assert {t.player_name for t in detail.totals} == {UNKNOWN_PLAYER_NAME}


class TestGameList:
    def test_counts_rounds_per_game(self):
        games = [_game("g2", date(2025, 1, 5)), _game("g1", date(2025, 1, 4))]
        results = _results("g1", (1, 2, 3, 4)) + _results("g2", (1, 2, 3, 4), (4, 3, 2, 1), (1, 1, 1, 1))

        items = build_game_list(games, results, NAMES)

        assert [(i.game.game_id, i.num_rounds) for i in items] == [("g2", 3), ("g1", 1)]
        assert items[0].player_names == ["Aki", "Ben", "Chie", "Dai"]


class TestHistory:
    def test_newest_first_rounds_in_order(self):
        early = _game("g1", date(2025, 1, 4), venue="Club")
        late_morning = _game("g2", date(2025, 1, 5), hour=9)
        late_evening = _game("g3", date(2025, 1, 5), hour=20)
        games = {g.game_id: g for g in (early, late_morning, late_evening)}
        results = [
            r
            for r in _results("g1", (1, 2, 3, 4), (4, 3, 2, 1))
            + _results("g2", (1, 2, 3, 4))
            + _results("g3", (1, 2, 3, 4), (4, 3, 2, 1))
            if r.player_id == "a"
        ]

        history = build_history(results, games)

        assert [(e.result.game_id, e.result.round_number) for e in history] == [
            ("g3", 1),
            ("g3", 2),
            ("g2", 1),
            ("g1", 1),
            ("g1", 2),
        ]
        assert history[-1].venue == "Club"
        assert history[0].date == date(2025, 1, 5)

    def test_skips_results_of_unknown_games(self):
        assert build_history(_results("gone", (1, 2, 3, 4)), {}) == []


class TestDailyStandings:
    def test_ordered_by_daily_rank_with_names(self):
        day = date(2025, 1, 4)
        summaries = rollup_day(day, _results("g1", (10000, 40000, 30000, 20000)))

        standings = build_daily_standings(list(reversed(summaries)), NAMES)

        assert [s.player_name for s in standings] == ["Ben", "Chie", "Dai", "Aki"]
        assert [s.summary.rank_point for s in standings] == [10, 6, 3, 0]


class TestDashboard:
    def _players(self):
        return [Player(player_id=p, name=NAMES[p]) for p in ROSTER] + [Player(player_id="e", name="Emi")]

    def test_empty_league(self):
        dashboard = build_dashboard(games=[], players=[], results=[], stats=[], today=date(2025, 3, 1))

        assert dashboard.total_games == 0
        assert dashboard.average_score == 0
        assert dashboard.highest_score is None
        assert dashboard.top_players == []

    def test_summary(self):
        games = [_game("g1", date(2025, 2, 27)), _game("g2", date(2025, 3, 2))]
        results = _results("g1", (40000, 30000, 20000, 10001)) + _results("g2", (10000, 45000, 30000, 20000))
        players = self._players()
        stats = compute_all_statistics(players, results, [])

        dashboard = build_dashboard(
            games=games,
            players=players,
            results=results,
            stats=stats,
            today=date(2025, 3, 15),
        )

        assert dashboard.total_games == 2
        assert dashboard.games_this_month == 1
        assert dashboard.total_players == 5
        # 205001 / 8 = 25625.125
        assert dashboard.average_score == 25625
        assert dashboard.highest_score.score == 45000
        assert dashboard.highest_score.player_name == "Ben"
        assert dashboard.highest_score.date == date(2025, 3, 2)
        assert [s.player_id for s in dashboard.top_players] == ["b", "a", "c", "d", "e"]
        assert dashboard.top_players[-1].games_played == 0

    def test_average_rounds_half_up(self):
        games = [_game("g1", date(2025, 3, 1))]
        results = _results("g1", (25001, 25001, 25000, 25000))
        dashboard = build_dashboard(games=games, players=[], results=results, stats=[], today=date(2025, 3, 1))

        # 25000.5 rounds up
        assert dashboard.average_score == 25001

    def test_top_players_capped_at_five(self):
        players = [Player(player_id=f"p{i}", name=f"P{i}") for i in range(7)]
        games = [
            Game(game_id=f"g{i}", date=date(2025, 3, 1), player_ids=(f"p{i}", "x1", "x2", "x3")) for i in range(7)
        ]
        results = []
        for i, game in enumerate(games):
            scores = dict(zip(game.player_ids, (i, 0, 0, 0), strict=True))
            results += aggregate_rounds(game.game_id, game.player_ids, [scores])
        stats = compute_all_statistics(players, results, [])

        dashboard = build_dashboard(games=games, players=players, results=results, stats=stats, today=date(2025, 3, 1))

        assert [s.player_id for s in dashboard.top_players] == ["p6", "p5", "p4", "p3", "p2"]

    def test_top_players_include_players_yet_to_play(self):
        players = [Player(player_id=p, name=NAMES[p]) for p in ROSTER] + [Player(player_id="e", name="Emi")]
        games = [_game("g1", date(2025, 3, 1))]
        results = _results("g1", (60000, 30000, 10000, -100))
        stats = compute_all_statistics(players, results, [])

        dashboard = build_dashboard(games=games, players=players, results=results, stats=stats, today=date(2025, 3, 1))

        assert [s.player_id for s in dashboard.top_players] == ["a", "b", "c", "e", "d"]
