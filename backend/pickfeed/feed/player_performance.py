from __future__ import annotations

import logging
import math

from pickfeed.analytics.sport_rules import SPORT_RULES, StatMap
from pickfeed.data_providers.base import BoxScoreProvider
from pickfeed.models.box_score import BoxScoreAthlete, TeamBoxScore
from pickfeed.models.feed import FeedPost, FeedPostType, PlayerPerformanceData
from pickfeed.models.game import Game
from pickfeed.services.perf_cache import PerformanceCache

logger = logging.getLogger(__name__)

DEFAULT_MAX_PLAYER_POSTS = 20


def stat_map(labels: list[str], values: list[str]) -> StatMap:
    """Zip parallel label/value arrays, dropping anything that is not numeric."""
    stats: StatMap = {}
    for label, raw in zip(labels, values):
        try:
            value = float(raw)
        except (TypeError, ValueError):
            continue
        if not math.isnan(value):
            stats[label] = value
    return stats


def _performance_post(game: Game, team_box: TeamBoxScore, athlete: BoxScoreAthlete, stats: StatMap) -> FeedPost:
    rules = SPORT_RULES[game.sport]
    is_home = team_box.team_abbreviation == game.home_team.abbreviation
    team, opponent = (game.home_team, game.away_team) if is_home else (game.away_team, game.home_team)
    home_score = game.home_score or 0
    away_score = game.away_score or 0
    is_win = home_score > away_score if is_home else away_score > home_score

    data = PlayerPerformanceData(
        player_name=athlete.display_name,
        player_image_url=athlete.headshot_url or rules.headshot_url(athlete.id),
        team_id=team.id,
        team_abbreviation=team.abbreviation,
        team_logo=team.logo,
        sport=game.sport,
        stats=stats,
        headline=rules.headline(stats),
        game_id=game.id,
        opponent_abbreviation=opponent.abbreviation,
        game_date=game.date,
        is_win=is_win,
    )
    return FeedPost(
        id=f"perf-{game.id}-{athlete.id}",
        type=FeedPostType.PLAYER_PERFORMANCE,
        timestamp=game.start_time,
        sport=game.sport,
        data=data,
    )


def standout_posts(game: Game, box_score: list[TeamBoxScore]) -> list[FeedPost]:
    rules = SPORT_RULES.get(game.sport)
    if rules is None:
        return []

    posts: list[FeedPost] = []
    for team_box in box_score:
        for athlete in team_box.athletes:
            stats = stat_map(team_box.labels, athlete.stats)
            if rules.is_standout(stats):
                posts.append(_performance_post(game, team_box, athlete, stats))
    return posts


async def build_player_performances(
    games: list[Game],
    provider: BoxScoreProvider,
    cache: PerformanceCache,
    max_posts: int = DEFAULT_MAX_PLAYER_POSTS,
) -> list[FeedPost]:
    posts: list[FeedPost] = []

    for game in games:
        if not game.is_final:
            continue
        if len(posts) >= max_posts:
            break

        cache_key = f"perf-{game.id}"
        cached = cache.get(cache_key)
        if cached is not None:
            posts.extend(cached)
            continue

        try:
            box_score = await provider.fetch_box_score(game.sport, game.id)
        except Exception:
            logger.exception("box score fetch failed: game_id=%s sport=%s", game.id, game.sport.value)
            continue

        game_posts = standout_posts(game, box_score) if box_score else []
        cache.set(cache_key, game_posts)
        posts.extend(game_posts)

    return posts[:max_posts]
