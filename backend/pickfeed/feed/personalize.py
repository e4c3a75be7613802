from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from pickfeed.models.feed import (
    BigGameData,
    FeedPost,
    FeedPostType,
    NewsData,
    PlayerPerformanceData,
    TrendingPickData,
)
from pickfeed.models.sport import Sport


def is_team_relevant(post: FeedPost, followed_teams: set[str] | frozenset[str]) -> bool:
    """Posts that are about a followed team; only big games and trending picks carry team ids."""
    if post.type == FeedPostType.BIG_GAME and isinstance(post.data, BigGameData):
        return post.data.home_team.id in followed_teams or post.data.away_team.id in followed_teams
    if post.type == FeedPostType.TRENDING_PICK and isinstance(post.data, TrendingPickData):
        return post.data.team_id in followed_teams
    return False


def is_post_for_team(post: FeedPost, team_id: str, team_abbreviation: str) -> bool:
    data = post.data
    if post.type == FeedPostType.BIG_GAME and isinstance(data, BigGameData):
        return team_id in (data.home_team.id, data.away_team.id)
    if post.type == FeedPostType.TRENDING_PICK and isinstance(data, TrendingPickData):
        return data.team_id == team_id
    if post.type == FeedPostType.PLAYER_PERFORMANCE and isinstance(data, PlayerPerformanceData):
        return data.team_abbreviation == team_abbreviation
    if post.type == FeedPostType.NEWS and isinstance(data, NewsData):
        # untagged stories are league-wide news
        return not data.team_abbreviations or team_abbreviation in data.team_abbreviations
    return False


def personalize_posts(
    posts: list[FeedPost],
    followed_leagues: Iterable[Sport] = (),
    followed_teams: Iterable[str] = (),
) -> list[FeedPost]:
    """Keep posts from followed leagues and move followed-team posts to the front.

    The reorder is a stable sort, so within each half the incoming
    (timestamp) order is kept. With nothing followed the posts pass through.
    """
    leagues = frozenset(Sport(s) for s in followed_leagues)
    teams = frozenset(followed_teams)
    if not leagues and not teams:
        return list(posts)

    kept = [p for p in posts if not leagues or p.sport in leagues]
    if teams:
        kept.sort(key=lambda p: not is_team_relevant(p, teams))
    return kept


def league_posts(
    posts: list[FeedPost],
    league: Sport,
    team_id: str | None = None,
    team_abbreviation: str | None = None,
) -> list[FeedPost]:
    sport_posts = [p for p in posts if p.sport == league]
    if not team_id:
        return sport_posts
    return [p for p in sport_posts if is_post_for_team(p, team_id, team_abbreviation or "")]


@dataclass(frozen=True)
class FeedFilter:
    """A reader's view of the feed: the all-leagues view uses follows, a league view ignores them."""

    followed_leagues: frozenset[Sport] = field(default_factory=frozenset)
    followed_teams: frozenset[str] = field(default_factory=frozenset)
    league: Sport | None = None
    team_id: str | None = None
    team_abbreviation: str | None = None

    def apply(self, posts: list[FeedPost]) -> list[FeedPost]:
        if self.league is not None:
            return league_posts(posts, self.league, self.team_id, self.team_abbreviation)
        return personalize_posts(posts, self.followed_leagues, self.followed_teams)
