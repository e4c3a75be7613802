from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Union

from pickfeed.models.game import GameStatus, Team
from pickfeed.models.sport import Sport


class FeedPostType(str, Enum):
    TRENDING_PICK = "trending_pick"
    BIG_GAME = "big_game"
    PLAYER_PERFORMANCE = "player_performance"
    NEWS = "news"
    HOT_PICKS = "hot_picks"
    GAME_RESULT = "game_result"


@dataclass
class TrendingPickData:
    game_id: str
    team_id: str
    team_name: str
    team_abbreviation: str
    team_logo: str
    opponent_name: str
    opponent_abbreviation: str
    opponent_logo: str
    pick_count: int
    total_picks_for_game: int
    game_date: date
    start_time: datetime
    sport: Sport

    @property
    def pick_share(self) -> float:
        return self.pick_count / self.total_picks_for_game if self.total_picks_for_game else 0.0


@dataclass
class HotPickEntry:
    username: str
    picked_team_id: str
    picked_team_name: str
    picked_team_abbreviation: str
    picked_team_logo: str
    opponent_abbreviation: str
    opponent_logo: str
    sport: Sport
    game_id: str


@dataclass
class HotPicksData:
    date: date
    picks: list[HotPickEntry]
    headline: str


@dataclass
class BigGameData:
    game_id: str
    home_team: Team
    away_team: Team
    start_time: datetime
    game_date: date
    sport: Sport
    headline: str
    home_score: int | None
    away_score: int | None
    status: GameStatus
    score: int = 0


@dataclass
class PlayerPerformanceData:
    player_name: str
    player_image_url: str
    team_id: str
    team_abbreviation: str
    team_logo: str
    sport: Sport
    stats: dict[str, float]
    headline: str
    game_id: str
    opponent_abbreviation: str
    game_date: date
    is_win: bool


@dataclass
class NewsData:
    headline: str
    description: str
    link_url: str
    sport: Sport
    published: datetime
    image_url: str | None = None
    team_abbreviations: list[str] = field(default_factory=list)


@dataclass
class GameResultPickEntry:
    username: str
    picked_team_id: str
    picked_team_abbreviation: str
    picked_team_logo: str
    correct: bool


@dataclass
class GameResultData:
    game_id: str
    sport: Sport
    home_team: Team
    away_team: Team
    home_score: int
    away_score: int
    game_date: date
    winner_abbreviation: str | None
    pickers: list[GameResultPickEntry]
    correct_pickers: list[GameResultPickEntry]
    correct_count: int
    total_pickers: int


FeedPostData = Union[
    TrendingPickData,
    HotPicksData,
    BigGameData,
    PlayerPerformanceData,
    NewsData,
    GameResultData,
]


@dataclass
class FeedPost:
    id: str
    type: FeedPostType
    timestamp: datetime
    sport: Sport
    data: FeedPostData


@dataclass
class FeedPage:
    posts: list[FeedPost]
    has_more: bool
