"""
Court assignment: decide which partner pair faces which on each court.

Branch-and-bound over every way of splitting 2*N pairs into N courts.
For 10 pairs (5 courts) that is 945 matchings, so exhaustive search is fine.

Court cost (lower is better):
  - wins imbalance between the two pairs (main objective)
  - extra penalty for lopsided courts when a streaker is on court
  - small uniform noise, larger when a streaker is present, capped
"""
from __future__ import annotations

import math
import random
from typing import List, Optional, Sequence

from badminton_rr.config import DEFAULT_CONFIG, MatchmakingConfig
from badminton_rr.services.partner_pairing import Pairing, is_streaking


def pair_wins(pair: Pairing) -> int:
    return pair.p1.wins + pair.p2.wins


def has_streaker(pair: Pairing, config: MatchmakingConfig = DEFAULT_CONFIG) -> bool:
    return is_streaking(pair.p1, config) or is_streaking(pair.p2, config)


def court_cost(
    a: Pairing,
    b: Pairing,
    rng: random.Random,
    config: MatchmakingConfig = DEFAULT_CONFIG,
) -> float:
    imbalance = abs(pair_wins(a) - pair_wins(b))
    streakers_present = has_streaker(a, config) or has_streaker(b, config)

    # High balance: 0-1, mid: 2, low: >= threshold
    penalty = 0.0
    if streakers_present and imbalance >= config.low_balance_threshold:
        penalty = (imbalance - (config.low_balance_threshold - 1)) * config.low_balance_penalty

    magnitude = min(
        config.base_noise + (config.streak_noise if streakers_present else 0.0),
        config.max_noise,
    )
    noise = rng.uniform(-magnitude, magnitude)

    return imbalance * 1.0 + penalty + noise


def assign_courts(
    pairs: Sequence[Pairing],
    num_courts: int,
    rng: Optional[random.Random] = None,
    config: MatchmakingConfig = DEFAULT_CONFIG,
) -> Optional[List[Pairing]]:
    """Arrange pairs into courts with the lowest total court cost.

    Returns a flat list [side1, side2, side1, side2, ...] of length
    2 * num_courts, or None when the input does not hold exactly
    2 * num_courts pairs.
    """
    if num_courts < 1 or len(pairs) != 2 * num_courts:
        return None

    rng = rng or random.Random()
    remaining: List[Pairing] = list(pairs)
    chosen: List[Pairing] = []
    best: Optional[List[Pairing]] = None
    best_cost = math.inf

    def search(cost_so_far: float) -> None:
        nonlocal best, best_cost
        if len(chosen) == 2 * num_courts:
            if cost_so_far < best_cost:
                best_cost = cost_so_far
                best = list(chosen)
            return

        first = remaining[0]
        for i in range(1, len(remaining)):
            second = remaining[i]
            c = court_cost(first, second, rng, config)

            # bound
            if cost_so_far + c >= best_cost:
                continue

            del remaining[i]
            del remaining[0]
            chosen.extend((first, second))

            search(cost_so_far + c)

            chosen.pop()
            chosen.pop()
            remaining.insert(0, first)
            remaining.insert(i, second)

    search(0.0)
    return best
