from __future__ import annotations

import logging
from datetime import UTC, datetime

from pickfeed.analytics.ept import EPTRankings, build_rankings
from pickfeed.analytics.sport_rules import rules_for
from pickfeed.data_providers.base import EPTProvider
from pickfeed.models.sport import Sport

logger = logging.getLogger(__name__)


async def get_ept_rankings(sport: Sport, provider: EPTProvider, now: datetime | None = None) -> EPTRankings:
    """Season EPT rankings for ``sport``, one ranked list per group in its rules.

    Provider errors propagate; a group the provider could not fill comes back empty.
    """
    now = now or datetime.now(UTC)
    rules = rules_for(sport)
    start, season = rules.season(now.date())
    groups = await provider.fetch_ept_players(sport, start)
    rankings = build_rankings(sport, season, groups, rules.ept_formula(), now)
    logger.info(
        "ept rankings built: sport=%s season=%s groups=%s",
        sport.value,
        season,
        {name: len(players) for name, players in rankings.groups.items()},
    )
    return rankings


def rankings_to_dict(rankings: EPTRankings) -> dict:
    return {
        "sport": rankings.sport.value,
        "season": rankings.season,
        "updated_at": rankings.updated_at.isoformat(),
        "formula": rankings.formula,
        "groups": {
            name: [
                {
                    "rank": p.rank,
                    "name": p.name,
                    "team": p.team,
                    "ept": p.ept,
                    "image_url": p.image_url,
                    "stats": p.stats,
                }
                for p in players
            ]
            for name, players in rankings.groups.items()
        },
    }
