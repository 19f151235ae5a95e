"""
Match Statistics Aggregator Tests

Tests cover:
1. Played match selection
2. Per-player totals (unknown players dropped)
3. Podium / table ranking
4. Match summaries and player performance
"""

import pytest
from datetime import date

from app.club.models import ClubEvent, EventType, StatEvent
from app.club.stats import (
    UNKNOWN_PLAYER_NAME,
    build_leaderboard,
    build_leaderboards,
    combine_stats,
    describe_match,
    match_results,
    played_matches,
    player_performance,
)


# =============================================================================
# Played matches
# =============================================================================

class TestPlayedMatches:
    """Only Match events with a result count"""

    def test_newest_first(self, matches):
        assert [m.id for m in played_matches(matches)] == ["e3", "e2", "e1"]

    def test_unplayed_and_non_match_events_ignored(self, matches, make_match):
        events = matches + [
            make_match("future", date(2025, 7, 1), result=None, scorers=[("p1", 5)]),
            make_match("blank", date(2025, 5, 24), result="  ", scorers=[("p1", 5)]),
            ClubEvent(id="t1", title="Entraînement", type=EventType.training,
                      date=date(2025, 5, 4), result="ok",
                      scorers=[StatEvent(player_id="p1", count=5)]),
        ]
        assert [m.id for m in played_matches(events)] == ["e3", "e2", "e1"]

    def test_filter_by_date(self, matches):
        assert [m.id for m in played_matches(matches, date(2025, 5, 10))] == ["e2"]


# =============================================================================
# Combined stats
# =============================================================================

class TestCombineStats:

    def test_totals_per_player(self, ctx, matches, players):
        stats = {s.player_id: s for s in combine_stats(ctx, matches, players)}

        assert (stats["p1"].goals, stats["p1"].assists) == (3, 1)
        assert (stats["p2"].goals, stats["p2"].assists) == (2, 1)
        assert (stats["p3"].goals, stats["p3"].assists) == (0, 3)
        assert (stats["p4"].goals, stats["p5"].goals) == (1, 1)

    def test_unknown_player_dropped(self, ctx, matches, players):
        stats = combine_stats(ctx, matches, players)
        assert "ghost" not in {s.player_id for s in stats}
        assert sum(s.goals for s in stats) == 7

    def test_roster_order_kept(self, ctx, matches, players):
        assert [s.player_id for s in combine_stats(ctx, matches, players)] == ["p1", "p2", "p3", "p4", "p5"]

    def test_unplayed_match_stats_ignored(self, ctx, players, make_match):
        events = [make_match("x", date(2025, 7, 1), result=None, scorers=[("p1", 4)])]
        assert all(s.goals == 0 for s in combine_stats(ctx, events, players))


# =============================================================================
# Leaderboards
# =============================================================================

class TestLeaderboards:

    def test_scorers_podium_and_table(self, ctx, matches, players):
        board = build_leaderboards(ctx, matches, players).scorers

        assert board.title == "Meilleurs Buteurs"
        assert [(e.rank, e.medal, e.player_id, e.value) for e in board.podium] == [
            (1, "gold", "p1", 3),
            (2, "silver", "p2", 2),
            (3, "bronze", "p4", 1),
        ]
        # secondary stat shown on the podium
        assert [e.secondary_value for e in board.podium] == [1, 1, 0]
        assert [(e.rank, e.player_id, e.value) for e in board.table] == [(4, "p5", 1)]

    def test_ties_keep_roster_order(self, ctx, matches, players):
        board = build_leaderboards(ctx, matches, players).assists

        assert board.title == "Meilleurs Passeurs"
        assert [e.player_id for e in board.podium] == ["p3", "p1", "p2"]
        assert board.table == []

    def test_zero_values_excluded(self, ctx, matches, players):
        boards = build_leaderboards(ctx, matches, players)
        ranked = [e.player_id for e in boards.assists.podium + boards.assists.table]
        assert "p4" not in ranked and "p5" not in ranked

    def test_ranking_is_non_increasing(self, ctx, players, make_match):
        events = [
            make_match(f"m{i}", date(2025, 4, i + 1), scorers=[(p.id, (i * 7 + j) % 4 + 1)])
            for i in range(6)
            for j, p in enumerate(players)
        ]
        board = build_leaderboards(ctx, events, players).scorers
        values = [e.value for e in board.podium] + [e.value for e in board.table]
        ranks = [e.rank for e in board.podium] + [e.rank for e in board.table]

        assert values == sorted(values, reverse=True)
        assert ranks == list(range(1, len(values) + 1))

    def test_empty_leaderboard(self, ctx, players):
        boards = build_leaderboards(ctx, [], players)
        assert not boards.scorers.has_data
        assert boards.scorers.podium == [] and boards.scorers.table == []

    def test_podium_smaller_than_three(self, ctx, players, make_match):
        events = [make_match("m1", date(2025, 5, 1), scorers=[("p2", 1)])]
        board = build_leaderboards(ctx, events, players).scorers
        assert [(e.rank, e.player_id) for e in board.podium] == [(1, "p2")]

    def test_build_leaderboard_from_stats(self, ctx, matches, players):
        stats = combine_stats(ctx, matches, players)
        board = build_leaderboard(stats, "assists", "goals", "Passes")
        assert board.stat == "assists"
        assert board.podium[0].secondary_value == 0


# =============================================================================
# Match summaries / performance
# =============================================================================

class TestMatchSummaries:

    def test_describe_match_formats_counts(self, matches, players):
        summary = describe_match(matches[0], players)

        assert summary.result == "3-1"
        assert summary.scorers == ["Yassine Amrani (2)", "Karim Benali"]
        assert summary.assists == ["Élodie Martin (2)", "Yassine Amrani"]

    def test_unknown_player_rendered(self, matches, players):
        summary = describe_match(matches[2], players)
        assert summary.scorers[-1] == UNKNOWN_PLAYER_NAME

    def test_results_of_a_day(self, matches, players):
        results = match_results(matches, players, on_date=date(2025, 5, 17))
        assert [r.id for r in results] == ["e3"]
        assert match_results(matches, players, on_date=date(2025, 1, 1)) == []


class TestPlayerPerformance:

    @pytest.mark.parametrize("player_id,expected", [
        ("p1", (2, 3, 1)),
        ("p3", (2, 0, 3)),
        ("p4", (1, 1, 0)),
        ("nobody", (0, 0, 0)),
    ])
    def test_performance(self, matches, player_id, expected):
        perf = player_performance(player_id, matches)
        assert (perf.matches_played, perf.goals_scored, perf.assists_made) == expected

    def test_renamed_player_keeps_stats(self, ctx, matches, players, make_player):
        renamed = [make_player("p1", "Yassine", "El Amrani")] + players[1:]
        board = build_leaderboards(ctx, matches, renamed).scorers
        assert board.podium[0].name == "Yassine El Amrani"
        assert board.podium[0].value == 3
