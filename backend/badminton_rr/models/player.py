from pydantic import BaseModel, ConfigDict, Field


class Player(BaseModel):
    """A player in the pool. Stats are only changed by result application."""

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(gt=0)
    name: str = Field(min_length=1)
    wins: int = Field(default=0, ge=0)
    point_diff: int = Field(default=0, alias="pointDiff")  # signed, cumulative across matches
    loss_streak: int = Field(default=0, ge=0, alias="lossStreak")  # consecutive rounds lost
