"""
Tests for the tournament lifecycle: roster edits, drawing rounds, saving results.
"""
import random

import pytest

from badminton_rr.models.match import MatchScore, Side
from badminton_rr.models.tournament_state import TournamentState
from badminton_rr.services.result_applier import MissingScoreError, TiedScoreError
from badminton_rr.services.round_generator import InsufficientPlayersError
from badminton_rr.services.tournament import (
    ActiveRoundError,
    DuplicatePlayerError,
    InvalidPlayerNameError,
    NoActiveRoundError,
    TournamentError,
    UnknownPlayerError,
    add_partner_keys,
    add_player,
    new_tournament,
    record_winner,
    remove_player,
    reset_tournament,
    start_round,
    submit_results,
)


def _with_players(n: int) -> TournamentState:
    state = new_tournament()
    for i in range(1, n + 1):
        state = add_player(state, f"Player {i}")
    return state


def _winning_scores(state: TournamentState) -> dict[int, MatchScore]:
    return {m.court_number: MatchScore(side1=21, side2=15) for m in state.current_matches}


class TestRoster:
    def test_add_player_assigns_ids(self):
        state = _with_players(3)
        assert [p.id for p in state.players] == [1, 2, 3]
        assert state.next_id == 4
        assert all(p.wins == 0 and p.point_diff == 0 and p.loss_streak == 0 for p in state.players)

    def test_name_is_trimmed(self):
        state = add_player(new_tournament(), "  Holly  ")
        assert state.players[0].name == "Holly"

    def test_empty_name_rejected(self):
        with pytest.raises(InvalidPlayerNameError):
            add_player(new_tournament(), "   ")

    def test_duplicate_name_case_insensitive(self):
        state = add_player(new_tournament(), "Rudolph")
        with pytest.raises(DuplicatePlayerError):
            add_player(state, " rudolph ")

    def test_add_does_not_mutate(self):
        state = new_tournament()
        add_player(state, "Comet")
        assert state.players == []
        assert state.next_id == 1

    def test_remove_player_keeps_history(self):
        state = add_partner_keys(_with_players(4), ["1-2"])
        state = remove_player(state, 2)
        assert [p.id for p in state.players] == [1, 3, 4]
        assert state.past_partners == ["1-2"]

    def test_ids_not_reused_after_remove(self):
        state = remove_player(_with_players(3), 3)
        state = add_player(state, "Vixen")
        assert state.players[-1].id == 4

    def test_remove_unknown(self):
        with pytest.raises(UnknownPlayerError):
            remove_player(_with_players(2), 9)

    def test_errors_share_base(self):
        assert issubclass(DuplicatePlayerError, TournamentError)
        assert issubclass(ActiveRoundError, TournamentError)


class TestPartnerHistory:
    def test_union_keeps_order_without_duplicates(self):
        state = add_partner_keys(new_tournament(), ["1-2", "3-4"])
        state = add_partner_keys(state, ["3-4", "2-5"])
        assert state.past_partners == ["1-2", "3-4", "2-5"]

    def test_reset_clears_everything(self):
        state, _ = start_round(_with_players(4), num_courts=1, rng=random.Random(1))
        fresh = reset_tournament(state)
        assert fresh.players == []
        assert fresh.past_partners == []
        assert fresh.round_number == 0
        assert fresh.next_id == 1
        assert fresh.current_matches == []


class TestRoundLifecycle:
    def test_start_round(self, rng):
        state, result = start_round(_with_players(20), num_courts=5, rng=rng)
        assert state.round_number == 1
        assert len(state.current_matches) == 5
        assert state.current_matches == result.matches
        assert sorted(state.past_partners) == sorted(result.partner_keys())
        assert state.current_winners == {}

    def test_cannot_start_during_active_round(self, rng):
        state, _ = start_round(_with_players(4), num_courts=1, rng=rng)
        with pytest.raises(ActiveRoundError):
            start_round(state, num_courts=1, rng=rng)

    def test_insufficient_players_leaves_state(self, rng):
        state = _with_players(7)
        with pytest.raises(InsufficientPlayersError):
            start_round(state, num_courts=2, rng=rng)
        assert state.round_number == 0
        assert state.current_matches == []

    def test_submit_results(self, rng):
        state, _ = start_round(_with_players(8), num_courts=2, rng=rng)
        done = submit_results(state, _winning_scores(state))
        assert done.current_matches == []
        assert done.round_number == 1
        assert sum(p.wins for p in done.players) == 4
        assert sum(p.point_diff for p in done.players) == 0
        assert sum(p.loss_streak for p in done.players) == 4

    def test_submit_without_round(self):
        with pytest.raises(NoActiveRoundError):
            submit_results(_with_players(4), {})

    def test_bad_scores_keep_round_open(self, rng):
        state, _ = start_round(_with_players(4), num_courts=1, rng=rng)
        with pytest.raises(TiedScoreError):
            submit_results(state, {1: MatchScore(side1=9, side2=9)})
        with pytest.raises(MissingScoreError):
            submit_results(state, {})
        assert state.has_active_round
        assert all(p.wins == 0 for p in state.players)

    def test_record_winner(self, rng):
        state, _ = start_round(_with_players(4), num_courts=1, rng=rng)
        state = record_winner(state, 1, Side.SIDE_1)
        assert state.current_winners == {1: Side.SIDE_1}
        with pytest.raises(NoActiveRoundError):
            record_winner(state, 2, Side.SIDE_2)

    def test_rounds_avoid_repeat_partners(self):
        rng = random.Random(2024)
        state = _with_players(8)
        for _ in range(3):
            before = set(state.past_partners)
            state, result = start_round(state, num_courts=2, rng=rng)
            if not result.fallback:
                assert not set(result.partner_keys()) & before
            state = submit_results(state, _winning_scores(state))
        assert state.round_number == 3

    def test_state_survives_json_between_steps(self, rng):
        state, _ = start_round(_with_players(8), num_courts=2, rng=rng)
        reloaded = TournamentState.from_json(state.to_json())
        done = submit_results(reloaded, _winning_scores(reloaded))
        assert sum(p.wins for p in done.players) == 4
