"""
Tests for leaderboard ordering: wins desc, point diff desc, name asc.
"""
from badminton_rr.models.player import Player
from badminton_rr.services.leaderboard import build_leaderboard, rank_players


def _player(pid: int, name: str, wins: int, point_diff: int) -> Player:
    return Player(id=pid, name=name, wins=wins, point_diff=point_diff)


class TestRankPlayers:
    def test_wins_then_diff_then_name(self):
        players = [
            _player(1, "Bob", 2, 5),
            _player(2, "Alice", 2, 5),
            _player(3, "Zed", 3, -10),
            _player(4, "Cara", 2, 10),
        ]
        assert [p.name for p in rank_players(players)] == ["Zed", "Cara", "Alice", "Bob"]

    def test_name_comparison_is_case_sensitive(self):
        players = [_player(1, "alice", 0, 0), _player(2, "Bob", 0, 0)]
        assert [p.name for p in rank_players(players)] == ["Bob", "alice"]

    def test_input_untouched(self):
        players = [_player(1, "B", 0, 0), _player(2, "A", 1, 0)]
        rank_players(players)
        assert [p.id for p in players] == [1, 2]

    def test_empty(self):
        assert rank_players([]) == []


class TestBuildLeaderboard:
    def test_positions_are_one_based(self):
        rows = build_leaderboard([_player(1, "A", 0, -3), _player(2, "B", 4, 12)])
        assert [(r.position, r.player.name) for r in rows] == [(1, "B"), (2, "A")]

    def test_point_diff_label(self):
        rows = build_leaderboard([_player(1, "A", 2, 7), _player(2, "B", 1, 0), _player(3, "C", 0, -4)])
        assert [r.point_diff_label for r in rows] == ["+7", "+0", "-4"]
