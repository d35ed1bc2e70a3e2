"""
Round generation: one round of 2v2 court matchups.

Steps:
  1. shuffle the roster once
  2. strict partner pairing (no repeated partners); with more players than
     court spots, retry after benching the players with the most used
     partnerships; on failure relax and allow repeats, flagging the round
     as a fallback
  3. if pairing still fails, group the shuffled roster four at a time with
     no partner tracking at all
  4. arrange pairs onto courts with the court optimizer (pairing order if
     the optimizer declines)
  5. number courts 1..num_courts

Players that do not fit on a court sit the round out and are reported as byes.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import AbstractSet, List, Optional, Sequence, Tuple

from badminton_rr.config import DEFAULT_CONFIG, PLAYERS_PER_COURT, MatchmakingConfig
from badminton_rr.models.match import Match
from badminton_rr.models.player import Player
from badminton_rr.services.court_assignment import assign_courts
from badminton_rr.services.partner_pairing import Pairing, build_pairs, partner_key

logger = logging.getLogger(__name__)


class RoundGenerationError(Exception):
    """Base exception for round generation errors"""

    pass


class InsufficientPlayersError(RoundGenerationError):
    """Roster too small to fill every court"""

    def __init__(self, player_count: int, num_courts: int):
        self.player_count = player_count
        self.num_courts = num_courts
        super().__init__("Not enough players for all courts")


@dataclass
class RoundResult:
    matches: List[Match]
    used_pairs: List[Pairing]  # merge into past partners
    fallback: bool  # partner avoidance could not be fully honoured
    byes: List[Player] = field(default_factory=list)

    def partner_keys(self) -> List[str]:
        return [p.key for p in self.used_pairs]


def _random_groups(shuffled: List[Player], num_courts: int) -> RoundResult:
    matches: List[Match] = []
    court = 1
    i = 0
    while i + 3 < len(shuffled) and court <= num_courts:
        matches.append(
            Match(
                court_number=court,
                side1=[shuffled[i], shuffled[i + 1]],
                side2=[shuffled[i + 2], shuffled[i + 3]],
            )
        )
        court += 1
        i += 4
    return RoundResult(matches=matches, used_pairs=[], fallback=True, byes=shuffled[i:])


def _bench_blocked(
    pool: List[Player], past_partners: AbstractSet[str], count: int
) -> Tuple[List[Player], List[Player]]:
    """Split off *count* players with the most used partnerships inside *pool*.

    Ties keep the shuffled order. Returns (remaining, benched).
    """
    used_with = [
        sum(1 for other in pool if other.id != p.id and partner_key(p, other) in past_partners) for p in pool
    ]
    ranked = sorted(range(len(pool)), key=lambda i: -used_with[i])
    bench = set(ranked[:count])
    remaining = [p for i, p in enumerate(pool) if i not in bench]
    benched = [p for i, p in enumerate(pool) if i in bench]
    return remaining, benched


def generate_round(
    players: Sequence[Player],
    num_courts: int,
    past_partners: AbstractSet[str],
    rng: Optional[random.Random] = None,
    config: MatchmakingConfig = DEFAULT_CONFIG,
) -> RoundResult:
    """Generate court matchups for one round.

    Raises:
        InsufficientPlayersError: fewer than num_courts * 4 players
    """
    if num_courts < 1:
        raise ValueError(f"num_courts must be >= 1, got {num_courts}")
    if len(players) < num_courts * PLAYERS_PER_COURT:
        raise InsufficientPlayersError(len(players), num_courts)

    rng = rng or random.Random()
    shuffled = list(players)
    rng.shuffle(shuffled)

    # An odd roster can never be fully paired; the last shuffled player sits out
    pool = shuffled if len(shuffled) % 2 == 0 else shuffled[:-1]
    odd_out = shuffled[len(pool) :]

    fallback = False
    sat_out: List[Player] = []
    pairs = build_pairs(pool, past_partners, allow_repeat=False, rng=rng, config=config, shuffle=False)

    surplus = len(pool) - num_courts * PLAYERS_PER_COURT
    if pairs is None and surplus > 0:
        # Players beyond the courts sit out anyway; bench the most blocked ones first
        on_court, sat_out = _bench_blocked(pool, past_partners, surplus)
        pairs = build_pairs(on_court, past_partners, allow_repeat=False, rng=rng, config=config, shuffle=False)
        if pairs is None:
            sat_out = []

    if pairs is None:
        logger.warning("Strict partner pairing failed for %d players; allowing repeats", len(pool))
        pairs = build_pairs(pool, past_partners, allow_repeat=True, rng=rng, config=config, shuffle=False)
        fallback = True

    if pairs is None:
        logger.warning("Partner pairing failed for %d players; using random grouping", len(shuffled))
        result = _random_groups(shuffled, num_courts)
        logger.info(
            "Generated round: %d courts, fallback=%s, byes=%d",
            len(result.matches),
            result.fallback,
            len(result.byes),
        )
        return result

    court_pairs = pairs[: 2 * num_courts]
    benched = pairs[2 * num_courts :]

    ordered = assign_courts(court_pairs, num_courts, rng=rng, config=config)
    if ordered is None:
        logger.debug("Court optimizer declined %d pairs; keeping pairing order", len(court_pairs))
        ordered = court_pairs

    matches: List[Match] = []
    for court in range(1, num_courts + 1):
        t1 = ordered[2 * (court - 1)]
        t2 = ordered[2 * (court - 1) + 1]
        matches.append(Match(court_number=court, side1=t1.players, side2=t2.players))

    byes = [p for pair in benched for p in pair.players] + sat_out + odd_out
    logger.info("Generated round: %d courts, fallback=%s, byes=%d", len(matches), fallback, len(byes))
    return RoundResult(matches=matches, used_pairs=list(court_pairs), fallback=fallback, byes=byes)
