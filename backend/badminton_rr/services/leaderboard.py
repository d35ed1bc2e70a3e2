"""
Leaderboard ordering: wins desc, point_diff desc, name asc.
"""
from dataclasses import dataclass
from typing import Iterable, List

from badminton_rr.models.player import Player


def rank_players(players: Iterable[Player]) -> List[Player]:
    return sorted(players, key=lambda p: (-p.wins, -p.point_diff, p.name))


@dataclass
class LeaderboardRow:
    position: int  # 1-based
    player: Player

    @property
    def point_diff_label(self) -> str:
        diff = self.player.point_diff
        return f"+{diff}" if diff >= 0 else str(diff)


def build_leaderboard(players: Iterable[Player]) -> List[LeaderboardRow]:
    return [LeaderboardRow(position=i, player=p) for i, p in enumerate(rank_players(players), start=1)]
