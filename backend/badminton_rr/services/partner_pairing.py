"""
Partner pairing: split a player list into disjoint partner pairs.

Depth-first backtracking over the player list:
  - take the first unpaired player, try each unpaired candidate as partner
  - hard constraint (allow_repeat=False): never reuse a past partner key
  - soft preference: a streaking player tries higher-win partners first

The search state is a parallel ``used`` array indexed by position in the
(shuffled) list; every choice is undone exactly on backtrack.
Returns None when no full pairing exists under the constraint.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import AbstractSet, List, Optional, Sequence, Set

from badminton_rr.config import DEFAULT_CONFIG, MatchmakingConfig
from badminton_rr.models.player import Player


def partner_key(a: Player, b: Player) -> str:
    """Canonical 'min-max' id key for two partners."""
    return partner_key_for_ids(a.id, b.id)


def partner_key_for_ids(id1: int, id2: int) -> str:
    lo, hi = (id1, id2) if id1 < id2 else (id2, id1)
    return f"{lo}-{hi}"


@dataclass
class Pairing:
    p1: Player
    p2: Player

    @property
    def key(self) -> str:
        return partner_key(self.p1, self.p2)

    @property
    def players(self) -> List[Player]:
        return [self.p1, self.p2]


def is_streaking(player: Player, config: MatchmakingConfig = DEFAULT_CONFIG) -> bool:
    return player.loss_streak >= config.streak_threshold


def _order_candidates(
    first: Player,
    candidates: List[int],
    players: Sequence[Player],
    rng: random.Random,
    config: MatchmakingConfig,
) -> List[int]:
    if not is_streaking(first, config):
        ordered = list(candidates)
        rng.shuffle(ordered)
        return ordered

    # Prefer stronger partners; jitter keeps equal-win candidates from a fixed order
    keyed = [
        (players[j].wins * config.partner_bias + rng.uniform(-config.partner_jitter, config.partner_jitter), j)
        for j in candidates
    ]
    keyed.sort(key=lambda kv: kv[0], reverse=True)
    return [j for _, j in keyed]


def build_pairs(
    players: Sequence[Player],
    past_partners: AbstractSet[str],
    allow_repeat: bool,
    rng: Optional[random.Random] = None,
    config: MatchmakingConfig = DEFAULT_CONFIG,
    shuffle: bool = True,
) -> Optional[List[Pairing]]:
    """Partition *players* into partner pairs.

    Args:
        players: players to pair; every one of them must end up in a pair
        past_partners: partner keys already used this tournament
        allow_repeat: when False, pairs whose key is in past_partners are skipped
        rng: random source for the shuffle and candidate ordering
        config: matchmaking constants (streak threshold, partner bias)
        shuffle: shuffle the search order first; pass False when the caller
            already shuffled

    Returns:
        The list of pairs, or None if no full pairing exists.
    """
    rng = rng or random.Random()
    order = list(players)
    if shuffle:
        rng.shuffle(order)

    n = len(order)
    if n == 0 or n % 2 != 0:
        return None

    # allowed[i][j]: order[i] and order[j] may partner this round
    allowed = [
        [i != j and (allow_repeat or partner_key(order[i], order[j]) not in past_partners) for j in range(n)]
        for i in range(n)
    ]

    used = [False] * n
    current: List[Pairing] = []
    # bitmasks of used positions already proven impossible to complete
    failed: Set[int] = set()

    def dead_end() -> bool:
        # Some unpaired player has no allowed partner left
        free = [i for i in range(n) if not used[i]]
        return any(not any(allowed[i][j] for j in free) for i in free)

    def search(mask: int) -> bool:
        first = next((i for i in range(n) if not used[i]), -1)
        if first == -1:
            return True
        if mask in failed:
            return False

        used[first] = True
        candidates = [j for j in range(first + 1, n) if not used[j]]

        for j in _order_candidates(order[first], candidates, order, rng, config):
            if not allowed[first][j]:
                continue

            used[j] = True
            current.append(Pairing(p1=order[first], p2=order[j]))

            if not dead_end() and search(mask | (1 << first) | (1 << j)):
                return True

            # backtrack
            current.pop()
            used[j] = False

        used[first] = False
        failed.add(mask)
        return False

    if search(0):
        return list(current)
    return None
