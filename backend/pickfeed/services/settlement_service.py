from __future__ import annotations

import asyncio
import logging
from datetime import UTC, date, datetime

from pickfeed.analytics.aggregate import award_badges, resolve_pending_picks
from pickfeed.analytics.badges import evaluate_new_badges
from pickfeed.analytics.leaderboard import reset_weekly_points
from pickfeed.data_providers.base import GameProvider
from pickfeed.data_providers.memory import InMemoryPickStore, InMemoryUserStore
from pickfeed.models.game import Game
from pickfeed.utils.records import add_days

logger = logging.getLogger(__name__)


async def roll_weekly_points(users: InMemoryUserStore, today: date) -> bool:
    current, key = reset_weekly_points(await users.all_users(), users.last_weekly_reset, today)
    if key == users.last_weekly_reset:
        return False
    await users.replace_all(current)
    users.last_weekly_reset = key
    logger.info("weekly points reset: week=%s users=%s", key, len(current))
    return True


async def _games_around(games: GameProvider, day: date) -> list[Game]:
    # a pick's game can sit in a neighbouring UTC day bucket
    batches = await asyncio.gather(
        *(games.fetch_games(d) for d in (add_days(day, -1), day, add_days(day, 1))),
        return_exceptions=True,
    )
    found: dict[str, Game] = {}
    for batch in batches:
        if isinstance(batch, BaseException):
            logger.error("game fetch failed during settlement: day=%s error=%s", day.isoformat(), batch)
            continue
        for game in batch:
            found.setdefault(game.id, game)
    return list(found.values())


async def settle_day(
    day: date,
    picks: InMemoryPickStore,
    users: InMemoryUserStore,
    games: GameProvider,
    now: datetime | None = None,
) -> dict:
    """Resolve every pending pick for ``day`` whose game is final and update the pickers' aggregates.

    Also rolls weekly points over when the calendar week changed and awards
    any badges the updated aggregates now qualify for.
    """
    now = now or datetime.now(UTC)
    weekly_reset = await roll_weekly_points(users, now.date())

    day_games = await _games_around(games, day)
    games_by_id = {g.id: g for g in day_games}
    day_picks = await picks.picks_by_date(day)

    settled = users_updated = badges_awarded = 0
    for username in dict.fromkeys(p.username for p in day_picks):
        user, resolved = resolve_pending_picks(await users.get(username), day_picks, games_by_id)
        if not resolved:
            continue
        for pick in resolved:
            await picks.upsert(pick)

        all_picks = await picks.picks_by_user(username)
        today_picks = [p for p in all_picks if p.date == day]
        new_badges = evaluate_new_badges(user, today_picks, day_games, all_picks, now=now)
        user = award_badges(user, new_badges)
        await users.save(user)

        settled += len(resolved)
        users_updated += 1
        badges_awarded += len(new_badges)
        logger.info(
            "user settled: username=%s resolved=%s points=%s streak=%s new_badges=%s",
            username,
            len(resolved),
            user.total_points,
            user.current_streak,
            [b.id.value for b in new_badges],
        )

    return {
        "date": day.isoformat(),
        "picks_settled": settled,
        "users_updated": users_updated,
        "badges_awarded": badges_awarded,
        "weekly_reset": weekly_reset,
    }
