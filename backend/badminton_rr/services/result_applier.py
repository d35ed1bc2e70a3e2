"""
Result application: fold one round of court scores into player stats.

Example: side1 wins 21-10 => diff = +11
  - side1 players: wins += 1, point_diff += 11, loss_streak = 0
  - side2 players: wins += 0, point_diff -= 11, loss_streak += 1

Every court is validated before any player is touched, so a bad score
leaves the roster exactly as it was.
"""
from __future__ import annotations

import math
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from badminton_rr.models.match import Match, MatchScore, Side
from badminton_rr.models.player import Player


class ScoreError(ValueError):
    """Base exception for per-court score problems"""

    def __init__(self, court_number: int, message: str):
        self.court_number = court_number
        super().__init__(message)


class MissingScoreError(ScoreError):
    def __init__(self, court_number: int):
        super().__init__(court_number, f"Missing score for court {court_number}")


class InvalidScoreError(ScoreError):
    """Non-numeric, non-finite, fractional or negative score"""

    pass


class TiedScoreError(ScoreError):
    def __init__(self, court_number: int):
        super().__init__(court_number, f"Scores cannot be equal on court {court_number}")


def _as_points(value: Any, court_number: int) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidScoreError(court_number, f"Invalid score on court {court_number}")
    if isinstance(value, float) and not math.isfinite(value):
        raise InvalidScoreError(court_number, f"Invalid score on court {court_number}")
    if value < 0:
        raise InvalidScoreError(court_number, f"Negative score on court {court_number}")
    if isinstance(value, float) and not value.is_integer():
        raise InvalidScoreError(court_number, f"Invalid score on court {court_number}")
    return int(value)


def validate_score(court_number: int, score: MatchScore) -> Tuple[int, int]:
    """Return (side1, side2) points, or raise a ScoreError."""
    s1 = _as_points(score.side1, court_number)
    s2 = _as_points(score.side2, court_number)
    if s1 == s2:
        raise TiedScoreError(court_number)
    return s1, s2


def match_winner(s1: int, s2: int) -> Side:
    return Side.SIDE_1 if s1 > s2 else Side.SIDE_2


def apply_results(
    players: Sequence[Player],
    matches: Sequence[Match],
    scores_by_court: Mapping[int, MatchScore],
) -> List[Player]:
    """Return updated copies of *players* after the round's results.

    Score entries may be MatchScore objects or plain {"side1", "side2"} dicts.
    Players not on any court come back unchanged.

    Raises:
        MissingScoreError: a court has no score entry
        InvalidScoreError: a score is not a non-negative whole number
        TiedScoreError: both sides have the same score
    """
    validated: List[Tuple[Match, int, int]] = []
    for match in matches:
        score = scores_by_court.get(match.court_number)
        if score is None:
            raise MissingScoreError(match.court_number)
        if isinstance(score, Mapping):
            score = MatchScore(side1=score.get("side1"), side2=score.get("side2"))
        s1, s2 = validate_score(match.court_number, score)
        validated.append((match, s1, s2))

    updated: Dict[int, Player] = {p.id: p.model_copy() for p in players}

    def _record(player_id: int, diff: int, won: bool) -> None:
        p = updated.get(player_id)
        if p is None:
            return
        p.point_diff += diff
        if won:
            p.wins += 1
            p.loss_streak = 0
        else:
            p.loss_streak += 1

    for match, s1, s2 in validated:
        diff = s1 - s2
        side1_won = match_winner(s1, s2) is Side.SIDE_1
        for p in match.side1:
            _record(p.id, diff, side1_won)
        for p in match.side2:
            _record(p.id, -diff, not side1_won)

    return [updated[p.id] for p in players]
