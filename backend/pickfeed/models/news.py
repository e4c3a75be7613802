from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from pickfeed.models.sport import Sport


@dataclass(frozen=True)
class NewsArticle:
    headline: str
    published: datetime
    sport: Sport
    description: str = ""
    link: str = ""
    image_url: str | None = None
    team_abbreviations: list[str] = field(default_factory=list)
