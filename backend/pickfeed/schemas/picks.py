from datetime import date, datetime

from pydantic import BaseModel, Field

from pickfeed.models.pick import PickResult
from pickfeed.models.sport import Sport


class PickCreate(BaseModel):
    username: str = Field(min_length=1)
    game_id: str = Field(min_length=1)
    picked_team_id: str = Field(min_length=1)
    date: date
    confidence: int | None = None


class PickResponse(BaseModel):
    id: str
    username: str
    game_id: str
    date: date
    picked_team_id: str
    timestamp: datetime
    result: PickResult
    points_earned: int
    sport: Sport | None = None
    confidence: int | None = None

    model_config = {"from_attributes": True}
