from pickfeed.models.box_score import BoxScoreAthlete, TeamBoxScore
from pickfeed.models.feed import (
    BigGameData,
    FeedPage,
    FeedPost,
    FeedPostType,
    GameResultData,
    GameResultPickEntry,
    HotPickEntry,
    HotPicksData,
    NewsData,
    PlayerPerformanceData,
    TrendingPickData,
)
from pickfeed.models.game import Game, GameStatus, Team
from pickfeed.models.news import NewsArticle
from pickfeed.models.pick import Pick, PickResult, make_pick_id
from pickfeed.models.sport import Sport
from pickfeed.models.user import Badge, BadgeId, UserAggregate

__all__ = [
    "Sport",
    "Team",
    "Game",
    "GameStatus",
    "Pick",
    "PickResult",
    "make_pick_id",
    "Badge",
    "BadgeId",
    "UserAggregate",
    "BoxScoreAthlete",
    "TeamBoxScore",
    "NewsArticle",
    "FeedPost",
    "FeedPostType",
    "FeedPage",
    "TrendingPickData",
    "HotPickEntry",
    "HotPicksData",
    "BigGameData",
    "PlayerPerformanceData",
    "NewsData",
    "GameResultData",
    "GameResultPickEntry",
]
