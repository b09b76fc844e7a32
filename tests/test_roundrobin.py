"""Tests for roundrobin.py — fixture generation and verification."""

import pytest

from ppleague.roundrobin import (
    generate_join_fixtures,
    generate_round_robin,
    generate_rounds,
    group_by_week,
    verify_round_robin,
)


def _pairs(matches):
    return [tuple(sorted(m.players)) for m in matches]


class TestGenerateRounds:
    def test_even_players(self):
        rounds = generate_rounds(["A", "B", "C", "D"])
        # 4 players => 3 rounds, 2 games each
        assert len(rounds) == 3
        for r in rounds:
            assert len(r) == 2

    def test_odd_players(self):
        rounds = generate_rounds(["A", "B", "C", "D", "E"])
        # 5 players + bye = 6, N-1 = 5 rounds, 2 games each (one bye)
        assert len(rounds) == 5
        for r in rounds:
            assert len(r) == 2

    def test_no_player_twice_in_round(self):
        rounds = generate_rounds([f"P{i}" for i in range(10)])
        for r in rounds:
            seen = set()
            for p1, p2 in r:
                assert p1 not in seen and p2 not in seen
                seen.update((p1, p2))

    def test_first_round_pairs_ends(self):
        rounds = generate_rounds(["A", "B", "C", "D"])
        assert rounds[0] == [("A", "D"), ("B", "C")]
        # Rotation moves the last non-fixed entrant to the front
        assert rounds[1] == [("A", "C"), ("D", "B")]


class TestGenerateRoundRobin:
    def test_three_players_two_weeks(self):
        matches = generate_round_robin(["A", "B", "C"], total_weeks=2)
        assert sorted(_pairs(matches)) == [("A", "B"), ("A", "C"), ("B", "C")]
        assert {m.week_number for m in matches} <= {1, 2}

    def test_every_pair_once_even(self):
        players = [f"P{i}" for i in range(6)]
        matches = generate_round_robin(players, total_weeks=5)
        assert len(matches) == 15
        result = verify_round_robin(matches, players)
        assert result["valid"], result["errors"]

    def test_every_pair_once_odd(self):
        players = [f"P{i}" for i in range(7)]
        matches = generate_round_robin(players, total_weeks=3)
        assert len(matches) == 21
        result = verify_round_robin(matches, players)
        assert result["valid"], result["errors"]
        for p in players:
            assert result["games_per_player"][p] == 6

    def test_all_sizes_and_week_budgets(self):
        for n in range(2, 11):
            players = [f"P{i}" for i in range(n)]
            for weeks in range(1, 12):
                matches = generate_round_robin(players, total_weeks=weeks)
                assert len(matches) == n * (n - 1) // 2
                assert verify_round_robin(matches, players)["valid"]
                assert all(1 <= m.week_number <= weeks for m in matches)

    def test_rounds_packed_into_weeks(self):
        # 6 players => 5 rounds; 2 weeks => 3 rounds per week
        players = [f"P{i}" for i in range(6)]
        by_week = group_by_week(generate_round_robin(players, total_weeks=2))
        assert list(by_week) == [1, 2]
        assert len(by_week[1]) == 9
        assert len(by_week[2]) == 6

    def test_excess_rounds_clamped_to_last_week(self):
        # 8 players => 7 rounds; 3 weeks => 3 rounds per week, last week gets 1
        players = [f"P{i}" for i in range(8)]
        by_week = group_by_week(generate_round_robin(players, total_weeks=3))
        assert [len(v) for v in by_week.values()] == [12, 12, 4]

    def test_more_weeks_than_rounds(self):
        players = ["A", "B", "C", "D"]
        matches = generate_round_robin(players, total_weeks=10)
        assert sorted({m.week_number for m in matches}) == [1, 2, 3]

    def test_single_week(self):
        matches = generate_round_robin(["A", "B", "C", "D", "E"], total_weeks=1)
        assert len(matches) == 10
        assert {m.week_number for m in matches} == {1}

    def test_bye_never_appears(self):
        players = ["A", "B", "C", "D", "E"]
        for m in generate_round_robin(players, total_weeks=2):
            assert m.player1 in players
            assert m.player2 in players

    def test_player_named_bye(self):
        players = ["BYE", "B", "C"]
        matches = generate_round_robin(players, total_weeks=1)
        assert sorted(_pairs(matches)) == [("B", "BYE"), ("B", "C"), ("BYE", "C")]

    def test_deterministic(self):
        players = ["A", "B", "C", "D", "E", "F"]
        m1 = generate_round_robin(players, total_weeks=3)
        m2 = generate_round_robin(players, total_weeks=3)
        assert [(m.player1, m.player2, m.week_number) for m in m1] == \
               [(m.player1, m.player2, m.week_number) for m in m2]

    def test_unique_match_ids(self):
        matches = generate_round_robin([f"P{i}" for i in range(9)], total_weeks=4)
        ids = [m.match_id for m in matches]
        assert len(ids) == len(set(ids))

    def test_unique_match_ids_with_hyphenated_players(self):
        matches = generate_round_robin(["a-b", "c", "a", "b-c"], total_weeks=1)
        ids = [m.match_id for m in matches]
        assert len(ids) == 6
        assert len(set(ids)) == 6

    def test_one_player(self):
        assert generate_round_robin(["A"], total_weeks=3) == []

    def test_empty(self):
        assert generate_round_robin([], total_weeks=3) == []

    def test_zero_weeks_rejected(self):
        with pytest.raises(ValueError, match="total_weeks"):
            generate_round_robin(["A", "B"], total_weeks=0)

    def test_duplicate_players_rejected(self):
        with pytest.raises(ValueError, match="Duplicate players"):
            generate_round_robin(["A", "B", "A"], total_weeks=2)


class TestJoinFixtures:
    def test_spread_over_remaining_weeks(self):
        matches = generate_join_fixtures("N", ["A", "B", "C", "D"],
                                         current_week=2, total_weeks=4)
        # 3 remaining weeks: 2, 3, 4, then wrap to 2
        assert [m.week_number for m in matches] == [2, 3, 4, 2]
        assert all(m.player1 == "N" for m in matches)
        assert [m.player2 for m in matches] == ["A", "B", "C", "D"]

    def test_last_week(self):
        matches = generate_join_fixtures("N", ["A", "B"], current_week=3, total_weeks=3)
        assert [m.week_number for m in matches] == [3, 3]

    def test_no_opponents(self):
        assert generate_join_fixtures("N", [], current_week=1, total_weeks=2) == []

    def test_bad_week(self):
        with pytest.raises(ValueError, match="current_week"):
            generate_join_fixtures("N", ["A"], current_week=0, total_weeks=2)
        with pytest.raises(ValueError, match="current_week"):
            generate_join_fixtures("N", ["A"], current_week=3, total_weeks=2)

    def test_self_opponent(self):
        with pytest.raises(ValueError):
            generate_join_fixtures("N", ["A", "N"], current_week=1, total_weeks=2)


class TestVerifyRoundRobin:
    def test_detects_missing_pair(self):
        matches = generate_round_robin(["A", "B", "C"], total_weeks=1)[:-1]
        result = verify_round_robin(matches, ["A", "B", "C"])
        assert not result["valid"]
        assert any("played 0 times" in e for e in result["errors"])

    def test_detects_duplicate_pair(self):
        matches = generate_round_robin(["A", "B"], total_weeks=1) * 2
        result = verify_round_robin(matches, ["A", "B"])
        assert any("played 2 times" in e for e in result["errors"])
