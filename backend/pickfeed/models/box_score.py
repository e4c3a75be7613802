from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class BoxScoreAthlete:
    id: str
    display_name: str
    stats: list[str] = field(default_factory=list)
    headshot_url: str | None = None


@dataclass(frozen=True)
class TeamBoxScore:
    team_abbreviation: str
    labels: list[str] = field(default_factory=list)
    athletes: list[BoxScoreAthlete] = field(default_factory=list)
