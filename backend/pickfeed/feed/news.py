from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from pickfeed.data_providers.base import NewsProvider
from pickfeed.models.feed import FeedPost, FeedPostType, NewsData
from pickfeed.models.news import NewsArticle
from pickfeed.models.sport import Sport

logger = logging.getLogger(__name__)

DEFAULT_ARTICLES_PER_SPORT = 5


def _dedupe_key(article: NewsArticle) -> str:
    return article.link or article.headline


def merge_articles(articles: Iterable[NewsArticle]) -> list[NewsData]:
    """Collapse duplicates by link (or headline), union their team tags, newest first."""
    merged: dict[str, NewsData] = {}
    for article in articles:
        key = _dedupe_key(article)
        existing = merged.get(key)
        if existing is not None:
            for abbr in article.team_abbreviations:
                if abbr not in existing.team_abbreviations:
                    existing.team_abbreviations.append(abbr)
            continue
        merged[key] = NewsData(
            headline=article.headline,
            description=article.description or "",
            link_url=article.link or "",
            sport=article.sport,
            published=article.published,
            image_url=article.image_url,
            team_abbreviations=list(dict.fromkeys(article.team_abbreviations)),
        )
    return sorted(merged.values(), key=lambda n: n.published, reverse=True)


def _post_id(item: NewsData) -> str:
    parts = ["news", item.sport.value, str(int(item.published.timestamp() * 1000)), *item.team_abbreviations]
    return "-".join(parts)


def news_posts(items: list[NewsData]) -> list[FeedPost]:
    return [
        FeedPost(id=_post_id(item), type=FeedPostType.NEWS, timestamp=item.published, sport=item.sport, data=item)
        for item in items
    ]


async def _fetch_sport(provider: NewsProvider, sport: Sport, limit: int) -> list[NewsArticle]:
    try:
        articles = await provider.fetch_news(sport)
    except Exception:
        logger.exception("news fetch failed: sport=%s", sport.value)
        return []
    return articles[:limit]


async def build_news_posts(
    provider: NewsProvider,
    sports: Iterable[Sport] = tuple(Sport),
    per_sport: int = DEFAULT_ARTICLES_PER_SPORT,
) -> list[FeedPost]:
    batches = await asyncio.gather(*(_fetch_sport(provider, sport, per_sport) for sport in sports))
    return news_posts(merge_articles(article for batch in batches for article in batch))
