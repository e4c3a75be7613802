from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from pickfeed.config import settings
from pickfeed.dependencies import get_feed_sources
from pickfeed.feed.personalize import FeedFilter
from pickfeed.models.sport import Sport
from pickfeed.services.feed_service import FeedSources, build_feed_page, feed_page_to_dict

router = APIRouter(prefix="/feed", tags=["feed"])


@router.get("")
async def feed_page(
    offset: int = Query(default=0, ge=0, lt=settings.feed_max_lookback_days),
    leagues: list[Sport] = Query(default=[]),
    teams: list[str] = Query(default=[]),
    league: Sport | None = Query(default=None),
    team_id: str | None = Query(default=None),
    team_abbreviation: str | None = Query(default=None),
    sources: FeedSources = Depends(get_feed_sources),
) -> dict:
    feed_filter = FeedFilter(
        followed_leagues=frozenset(leagues),
        followed_teams=frozenset(teams),
        league=league,
        team_id=team_id,
        team_abbreviation=team_abbreviation,
    )
    page = await build_feed_page(offset, sources, feed_filter=feed_filter)
    return feed_page_to_dict(page)
