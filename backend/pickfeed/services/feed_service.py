from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import asdict, dataclass, field
from datetime import UTC, date, datetime
from typing import Any, TypeVar

from pickfeed.config import settings
from pickfeed.data_providers.base import BoxScoreProvider, GameProvider, NewsProvider, PickProvider
from pickfeed.feed.big_game import build_big_games
from pickfeed.feed.game_result import build_game_results
from pickfeed.feed.hot_picks import build_hot_picks
from pickfeed.feed.news import build_news_posts
from pickfeed.feed.personalize import FeedFilter
from pickfeed.feed.player_performance import build_player_performances
from pickfeed.feed.trending import build_trending_pick
from pickfeed.models.feed import FeedPage, FeedPost
from pickfeed.models.game import Game
from pickfeed.models.pick import Pick
from pickfeed.models.sport import Sport
from pickfeed.services.perf_cache import PerformanceCache, perf_cache
from pickfeed.utils.records import add_days

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class FeedSources:
    games: GameProvider
    picks: PickProvider
    box_scores: BoxScoreProvider
    news: NewsProvider
    cache: PerformanceCache = field(default_factory=lambda: perf_cache)


@dataclass(frozen=True)
class FeedWindow:
    start: int
    end: int
    has_more: bool

    def days(self, today: date) -> list[date]:
        return [add_days(today, -offset) for offset in range(self.start, self.end + 1)]


def feed_window(day_offset: int, page_size: int, max_lookback: int) -> FeedWindow:
    if day_offset < 0:
        raise ValueError("day_offset must be non-negative")
    if page_size < 1 or max_lookback < 1:
        raise ValueError("page_size and max_lookback must be positive")
    end = min(day_offset + page_size - 1, max_lookback - 1)
    return FeedWindow(start=day_offset, end=end, has_more=end < max_lookback - 1)


async def _fetch_day(fetch: Callable[[date], Awaitable[list[T]]], day: date, what: str) -> list[T]:
    try:
        return await fetch(day)
    except Exception:
        logger.exception("%s fetch failed; treating day as empty: day=%s", what, day.isoformat())
        return []


async def _isolated(name: str, default: T, builder: Callable[..., Any], *args: Any) -> T:
    try:
        result = builder(*args)
        if inspect.isawaitable(result):
            result = await result
        return result
    except Exception:
        logger.exception("feed builder failed; contributing nothing: builder=%s", name)
        return default


async def _none() -> None:
    return None


async def build_feed_page(
    day_offset: int,
    sources: FeedSources,
    *,
    today: date | None = None,
    now: datetime | None = None,
    page_size: int | None = None,
    max_lookback: int | None = None,
    max_player_posts: int | None = None,
    feed_filter: FeedFilter | None = None,
) -> FeedPage:
    """Assemble one page of the activity feed covering ``page_size`` days back from ``day_offset``.

    Trending, hot-picks and news posts only appear on the first page. Every
    other builder runs over the whole window. Posts are ordered purely by
    their timestamp, newest first. A ``feed_filter`` then narrows and reorders
    them for the reader.
    """
    now = now or datetime.now(UTC)
    today = today or now.date()
    window = feed_window(
        day_offset,
        page_size or settings.feed_page_size,
        max_lookback or settings.feed_max_lookback_days,
    )
    days = window.days(today)

    games_by_day, picks_by_day = await asyncio.gather(
        asyncio.gather(*(_fetch_day(sources.games.fetch_games, d, "games") for d in days)),
        asyncio.gather(*(_fetch_day(sources.picks.picks_by_date, d, "picks") for d in days)),
    )
    window_games: list[Game] = [g for games in games_by_day for g in games]
    picks_by_date: dict[date, list[Pick]] = dict(zip(days, picks_by_day))

    first_page = day_offset == 0
    today_games = games_by_day[0] if first_page and games_by_day else []
    today_picks = picks_by_date.get(today, []) if first_page else []

    trending, hot_picks, news, players, results, big_games = await asyncio.gather(
        _isolated("trending_pick", None, build_trending_pick, today_games, today_picks, today, now)
        if first_page
        else _none(),
        _isolated("hot_picks", None, build_hot_picks, today_games, today_picks, today, now)
        if first_page
        else _none(),
        _isolated("news", [], build_news_posts, sources.news, tuple(Sport), settings.news_articles_per_sport)
        if first_page
        else _none(),
        _isolated(
            "player_performance",
            [],
            build_player_performances,
            window_games,
            sources.box_scores,
            sources.cache,
            max_player_posts or settings.feed_max_player_posts,
        ),
        _isolated("game_result", [], build_game_results, window_games, picks_by_date),
        _isolated("big_game", [], build_big_games, window_games),
    )

    posts: list[FeedPost] = []
    for single in (trending, hot_picks):
        if single is not None:
            posts.append(single)
    for batch in (big_games, results, players, news):
        posts.extend(batch or [])

    posts.sort(key=lambda p: p.timestamp, reverse=True)
    if feed_filter is not None:
        posts = feed_filter.apply(posts)
    logger.info(
        "feed page built: day_offset=%s days=%s games=%s posts=%s has_more=%s",
        day_offset,
        len(days),
        len(window_games),
        len(posts),
        window.has_more,
    )
    return FeedPage(posts=posts, has_more=window.has_more)


def feed_page_to_dict(page: FeedPage) -> dict:
    return asdict(page)
