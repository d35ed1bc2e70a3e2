"""
Tournament lifecycle on top of the pairing and scoring engine.

Every operation takes a TournamentState and returns a new one; the input
is never modified. Callers persist the returned state (one writer per
tournament at a time).

Flow:
  add_player / remove_player  → roster edits
  start_round                 → matches for the next round, partner keys merged
  submit_results              → stats updated, round cleared
"""
from __future__ import annotations

import logging
import random
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from badminton_rr.config import DEFAULT_CONFIG, DEFAULT_NUM_COURTS, MatchmakingConfig
from badminton_rr.models.match import MatchScore, Side
from badminton_rr.models.player import Player
from badminton_rr.models.tournament_state import TournamentState, now_ms
from badminton_rr.services.result_applier import apply_results
from badminton_rr.services.round_generator import RoundResult, generate_round

logger = logging.getLogger(__name__)


class TournamentError(Exception):
    """Base exception for tournament operations"""

    pass


class InvalidPlayerNameError(TournamentError):
    pass


class DuplicatePlayerError(TournamentError):
    pass


class UnknownPlayerError(TournamentError):
    pass


class ActiveRoundError(TournamentError):
    """A round is in progress; its results must be saved first"""

    pass


class NoActiveRoundError(TournamentError):
    pass


def _touch(state: TournamentState, **changes: Any) -> TournamentState:
    changes["updated_at"] = now_ms()
    return state.model_copy(update=changes)


def new_tournament() -> TournamentState:
    return TournamentState()


def reset_tournament(state: Optional[TournamentState] = None) -> TournamentState:
    """Wipe roster, history and round. Only way past partners ever shrink."""
    if state is not None:
        logger.info("Resetting tournament at round %d (%d players)", state.round_number, len(state.players))
    return TournamentState()


def add_player(state: TournamentState, name: str) -> TournamentState:
    trimmed = (name or "").strip()
    if not trimmed:
        raise InvalidPlayerNameError("Player name cannot be empty")

    lowered = trimmed.lower()
    if any(p.name.strip().lower() == lowered for p in state.players):
        raise DuplicatePlayerError(f"Player '{trimmed}' already exists")

    player = Player(id=state.next_id, name=trimmed)
    logger.info("Added player %d '%s'", player.id, player.name)
    return _touch(state, players=[*state.players, player], next_id=state.next_id + 1)


def remove_player(state: TournamentState, player_id: int) -> TournamentState:
    """Drop a player from the pool. Partner history is left as is."""
    if not any(p.id == player_id for p in state.players):
        raise UnknownPlayerError(f"No player with id {player_id}")
    logger.info("Removed player %d", player_id)
    return _touch(state, players=[p for p in state.players if p.id != player_id])


def add_partner_keys(state: TournamentState, keys: Iterable[str]) -> TournamentState:
    merged: List[str] = list(state.past_partners)
    seen = set(merged)
    for key in keys:
        if key not in seen:
            seen.add(key)
            merged.append(key)
    return _touch(state, past_partners=merged)


def start_round(
    state: TournamentState,
    num_courts: int = DEFAULT_NUM_COURTS,
    rng: Optional[random.Random] = None,
    config: MatchmakingConfig = DEFAULT_CONFIG,
) -> Tuple[TournamentState, RoundResult]:
    """Draw the next round.

    Raises:
        ActiveRoundError: the current round has no results yet
        InsufficientPlayersError: fewer than num_courts * 4 players
    """
    if state.has_active_round:
        raise ActiveRoundError("You still have an active round. Save the results before drawing again.")

    result = generate_round(state.players, num_courts, state.past_partner_set(), rng=rng, config=config)
    if result.fallback:
        logger.warning("Round %d could not fully avoid repeated partners", state.round_number + 1)

    merged = add_partner_keys(state, result.partner_keys())
    new_state = _touch(
        merged,
        round_number=state.round_number + 1,
        current_matches=result.matches,
        current_winners={},
    )
    logger.info("Started round %d on %d courts", new_state.round_number, len(result.matches))
    return new_state, result


def record_winner(state: TournamentState, court_number: int, side: Side) -> TournamentState:
    if not any(m.court_number == court_number for m in state.current_matches):
        raise NoActiveRoundError(f"No active match on court {court_number}")
    winners = dict(state.current_winners)
    winners[court_number] = Side(side)
    return _touch(state, current_winners=winners)


def submit_results(state: TournamentState, scores_by_court: Mapping[int, MatchScore]) -> TournamentState:
    """Apply the active round's scores and close the round.

    Raises:
        NoActiveRoundError: nothing to score
        ScoreError: a court's score is missing, invalid or tied
    """
    if not state.has_active_round:
        raise NoActiveRoundError("No active round to save results for")

    updated = apply_results(state.players, state.current_matches, scores_by_court)
    logger.info("Saved results for round %d", state.round_number)
    return _touch(state, players=updated, current_matches=[], current_winners={})
