from __future__ import annotations

from datetime import UTC, date, datetime

from fastapi import APIRouter, Depends, Query

from pickfeed.data_providers.espn import ESPNClient
from pickfeed.data_providers.memory import InMemoryPickStore, InMemoryUserStore
from pickfeed.dependencies import get_game_provider, get_pick_store, get_user_store
from pickfeed.services.settlement_service import settle_day

router = APIRouter(prefix="/settlement", tags=["settlement"])


@router.post("/run")
async def run_settlement(
    day: date | None = Query(default=None, alias="date"),
    store: InMemoryPickStore = Depends(get_pick_store),
    users: InMemoryUserStore = Depends(get_user_store),
    games: ESPNClient = Depends(get_game_provider),
) -> dict:
    return await settle_day(day or datetime.now(UTC).date(), store, users, games)
