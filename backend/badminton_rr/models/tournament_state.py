"""
Tournament state record: the single JSON document handed to storage.

Keys on the wire are camelCase:
  players, roundNumber, pastPartners, nextId, currentMatches,
  currentWinners, updatedAt

``from_payload`` accepts whatever a store hands back: fields of the wrong
shape fall back to defaults and list or map entries that fail validation
are dropped, so a damaged record still loads.
"""
import json
import time
from typing import Any, Dict, List, Set

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from badminton_rr.models.match import Match, Side
from badminton_rr.models.player import Player


def now_ms() -> int:
    return int(time.time() * 1000)


class TournamentState(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    players: List[Player] = Field(default_factory=list)
    round_number: int = Field(default=0, ge=0, alias="roundNumber")
    past_partners: List[str] = Field(default_factory=list, alias="pastPartners")
    next_id: int = Field(default=1, ge=1, alias="nextId")
    current_matches: List[Match] = Field(default_factory=list, alias="currentMatches")
    current_winners: Dict[int, Side] = Field(default_factory=dict, alias="currentWinners")
    updated_at: int = Field(default_factory=now_ms, alias="updatedAt")

    @property
    def has_active_round(self) -> bool:
        return len(self.current_matches) > 0

    def past_partner_set(self) -> Set[str]:
        return set(self.past_partners)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_payload(cls, data: Any) -> "TournamentState":
        if not isinstance(data, dict):
            return cls()

        def _int(key: str, default: int, minimum: int = 0) -> int:
            value = data.get(key)
            if isinstance(value, bool) or not isinstance(value, int):
                return default
            return max(value, minimum)

        def _list(key: str) -> List[Any]:
            value = data.get(key)
            return value if isinstance(value, list) else []

        # Entries that fail validation are dropped; the rest of the record still loads
        players: List[Player] = []
        seen_ids: Set[int] = set()
        for raw in _list("players"):
            try:
                player = Player.model_validate(raw)
            except ValidationError:
                continue
            if player.id not in seen_ids:
                seen_ids.add(player.id)
                players.append(player)

        current_matches: List[Match] = []
        for raw in _list("currentMatches"):
            try:
                current_matches.append(Match.model_validate(raw))
            except ValidationError:
                continue

        current_winners: Dict[int, Side] = {}
        raw_winners = data.get("currentWinners")
        if isinstance(raw_winners, dict):
            for court, side in raw_winners.items():
                try:
                    current_winners[int(court)] = Side(side)
                except (TypeError, ValueError):
                    continue

        # A stale counter must never hand out an id that is already taken
        max_id = max(seen_ids, default=0)
        next_id = max(_int("nextId", 1, minimum=1), max_id + 1)

        return cls(
            players=players,
            round_number=_int("roundNumber", 0),
            past_partners=[k for k in _list("pastPartners") if isinstance(k, str)],
            next_id=next_id,
            current_matches=current_matches,
            current_winners=current_winners,
            updated_at=_int("updatedAt", now_ms()),
        )

    @classmethod
    def from_json(cls, raw: str) -> "TournamentState":
        return cls.from_payload(json.loads(raw))
