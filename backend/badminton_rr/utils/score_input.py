"""
Per-court score entry as typed into a form.

Handles raw entries like:
  {"side1": "21", "side2": "10"}   → MatchScore(side1=21, side2=10)
  {"side1": 21, "side2": ""}       → None (not entered yet)
  {"side1": "abc", "side2": "10"}  → MatchScore kept as typed; the
                                     result applier rejects it

Court keys may be ints or their string form (JSON object keys).
"""
from __future__ import annotations

import math
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from badminton_rr.models.match import Match, MatchScore, Side
from badminton_rr.services.result_applier import ScoreError, match_winner, validate_score

TIE = "tie"


def _to_number(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    text = value.strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return value


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def raw_entry_for(raw_by_court: Mapping[Any, Any], court_number: int) -> Optional[Mapping[str, Any]]:
    entry = raw_by_court.get(court_number)
    if entry is None:
        entry = raw_by_court.get(str(court_number))
    return entry


def parse_score_entry(raw: Optional[Mapping[str, Any]]) -> Optional[MatchScore]:
    """Convert one raw entry; None when either side is still blank."""
    if not raw:
        return None
    s1 = raw.get("side1")
    s2 = raw.get("side2")
    if _is_blank(s1) or _is_blank(s2):
        return None
    return MatchScore(side1=_to_number(s1), side2=_to_number(s2))


def parse_scores(matches: Sequence[Match], raw_by_court: Mapping[Any, Any]) -> Dict[int, MatchScore]:
    """Scores for every court that has a complete entry. Incomplete courts are left out."""
    scores: Dict[int, MatchScore] = {}
    for match in matches:
        score = parse_score_entry(raw_entry_for(raw_by_court, match.court_number))
        if score is not None:
            scores[match.court_number] = score
    return scores


def all_scores_entered(matches: Sequence[Match], raw_by_court: Mapping[Any, Any]) -> bool:
    """True when every court has two valid, unequal scores."""
    if not matches:
        return False
    for match in matches:
        score = parse_score_entry(raw_entry_for(raw_by_court, match.court_number))
        if score is None:
            return False
        try:
            validate_score(match.court_number, score)
        except ScoreError:
            return False
    return True


def winner_label(raw: Optional[Mapping[str, Any]]) -> Optional[Union[Side, str]]:
    """Preview of a court's winner: a Side, TIE, or None when not readable yet."""
    score = parse_score_entry(raw)
    if score is None:
        return None
    s1, s2 = score.side1, score.side2
    for v in (s1, s2):
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            return None
        if isinstance(v, float) and not math.isfinite(v):
            return None
    if s1 == s2:
        return TIE
    return match_winner(s1, s2)
