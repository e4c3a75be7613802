from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from pickfeed.models.sport import Sport


class GameStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    FINAL = "final"


@dataclass(frozen=True)
class Team:
    id: str
    name: str
    display_name: str
    abbreviation: str
    logo: str = ""
    record: str = "0-0"


@dataclass(frozen=True)
class Game:
    id: str
    sport: Sport
    date: date
    home_team: Team
    away_team: Team
    start_time: datetime
    status: GameStatus = GameStatus.SCHEDULED
    home_score: int | None = None
    away_score: int | None = None

    @property
    def is_final(self) -> bool:
        return self.status == GameStatus.FINAL

    @property
    def has_scores(self) -> bool:
        return self.home_score is not None and self.away_score is not None

    def team(self, team_id: str) -> Team | None:
        if team_id == self.home_team.id:
            return self.home_team
        if team_id == self.away_team.id:
            return self.away_team
        return None

    def sides(self, team_id: str) -> tuple[Team, Team]:
        """Return (picked, opponent); anything that is not the home team is treated as away."""
        if team_id == self.home_team.id:
            return self.home_team, self.away_team
        return self.away_team, self.home_team
