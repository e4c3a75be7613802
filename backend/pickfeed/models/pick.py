from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from pickfeed.models.sport import Sport


class PickResult(str, Enum):
    PENDING = "pending"
    CORRECT = "correct"
    INCORRECT = "incorrect"


def make_pick_id(username: str, game_id: str) -> str:
    return f"{username}-{game_id}"


@dataclass(frozen=True)
class Pick:
    id: str
    username: str
    game_id: str
    date: date
    picked_team_id: str
    timestamp: datetime
    result: PickResult = PickResult.PENDING
    points_earned: int = 0
    sport: Sport | None = None
    confidence: int | None = None

    @property
    def is_resolved(self) -> bool:
        return self.result != PickResult.PENDING
