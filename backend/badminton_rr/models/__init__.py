from badminton_rr.models.match import Match, MatchScore, Side
from badminton_rr.models.player import Player
from badminton_rr.models.tournament_state import TournamentState

__all__ = [
    "Player",
    "Match",
    "MatchScore",
    "Side",
    "TournamentState",
]
