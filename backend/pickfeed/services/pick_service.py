from __future__ import annotations

import logging
from datetime import UTC, date, datetime

from pickfeed.config import settings
from pickfeed.data_providers.base import GameProvider
from pickfeed.data_providers.memory import InMemoryPickStore
from pickfeed.models.game import Game, GameStatus
from pickfeed.models.pick import Pick, make_pick_id
from pickfeed.utils.records import add_days

logger = logging.getLogger(__name__)

VALID_CONFIDENCE = {1, 2, 3}


class PickRejected(Exception):
    def __init__(self, reason: str, status_code: int = 400) -> None:
        super().__init__(reason)
        self.reason = reason
        self.status_code = status_code


async def find_game(games: GameProvider, game_id: str, day: date) -> Game | None:
    # upstream schedules are bucketed by UTC day, so late games can land on a neighbour
    for candidate_day in (day, add_days(day, -1), add_days(day, 1)):
        try:
            found = next((g for g in await games.fetch_games(candidate_day) if g.id == game_id), None)
        except Exception:
            logger.exception("game lookup failed: game_id=%s day=%s", game_id, candidate_day.isoformat())
            continue
        if found is not None:
            return found
    return None


async def submit_pick(
    store: InMemoryPickStore,
    games: GameProvider,
    username: str,
    game_id: str,
    picked_team_id: str,
    day: date,
    confidence: int | None = None,
    now: datetime | None = None,
) -> Pick:
    if not username or not game_id or not picked_team_id:
        raise PickRejected("Missing required fields")

    now = now or datetime.now(UTC)
    day_picks = await store.picks_by_user_and_date(username, day)
    if not any(p.game_id == game_id for p in day_picks):
        if len({p.game_id for p in day_picks}) >= settings.max_daily_picks:
            raise PickRejected(f"Daily pick limit reached ({settings.max_daily_picks} picks per day)")

    game = await find_game(games, game_id, day)
    if game is None:
        raise PickRejected("Game not found", status_code=404)
    if game.status != GameStatus.SCHEDULED or now >= game.start_time:
        raise PickRejected("Game has already started")
    if game.team(picked_team_id) is None:
        raise PickRejected("Picked team is not playing in this game")

    pick = Pick(
        id=make_pick_id(username, game_id),
        username=username,
        game_id=game_id,
        date=day,
        picked_team_id=picked_team_id,
        timestamp=now,
        sport=game.sport,
        confidence=confidence if confidence in VALID_CONFIDENCE else None,
    )
    await store.upsert(pick)
    logger.info("pick stored: pick_id=%s team_id=%s", pick.id, picked_team_id)
    return pick
