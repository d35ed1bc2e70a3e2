from enum import Enum
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field

from badminton_rr.models.player import Player


class Side(str, Enum):
    SIDE_1 = "SIDE_1"
    SIDE_2 = "SIDE_2"


class Match(BaseModel):
    """One court of the active round: two players per side."""

    model_config = ConfigDict(populate_by_name=True)

    court_number: int = Field(ge=1, alias="courtNumber")
    side1: List[Player] = Field(min_length=2, max_length=2)
    side2: List[Player] = Field(min_length=2, max_length=2)

    def player_ids(self) -> List[int]:
        return [p.id for p in self.side1] + [p.id for p in self.side2]


class MatchScore(BaseModel):
    """Per-court score as entered. Checked by the result applier, not here."""

    side1: Any
    side2: Any
