from __future__ import annotations

from datetime import UTC, datetime

from fastapi import APIRouter, Depends, Query

from pickfeed.analytics.leaderboard import BoardType, build_leaderboard, leaderboard_to_dict
from pickfeed.data_providers.memory import InMemoryUserStore
from pickfeed.dependencies import get_user_store
from pickfeed.services.settlement_service import roll_weekly_points

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


@router.get("")
async def leaderboard(
    board: BoardType = Query(default=BoardType.ALLTIME),
    username: str | None = Query(default=None),
    limit: int = Query(default=100, ge=1, le=500),
    users: InMemoryUserStore = Depends(get_user_store),
) -> dict:
    await roll_weekly_points(users, datetime.now(UTC).date())
    return leaderboard_to_dict(build_leaderboard(await users.all_users(), board, username, limit))
