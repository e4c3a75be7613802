from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from pickfeed.data_providers.espn import ESPNClient
from pickfeed.data_providers.memory import InMemoryPickStore
from pickfeed.dependencies import get_game_provider, get_pick_store
from pickfeed.schemas.picks import PickCreate, PickResponse
from pickfeed.services.pick_service import PickRejected, submit_pick

router = APIRouter(prefix="/picks", tags=["picks"])


@router.post("", response_model=PickResponse, status_code=201)
async def create_pick(
    payload: PickCreate,
    store: InMemoryPickStore = Depends(get_pick_store),
    games: ESPNClient = Depends(get_game_provider),
) -> PickResponse:
    try:
        pick = await submit_pick(
            store,
            games,
            username=payload.username,
            game_id=payload.game_id,
            picked_team_id=payload.picked_team_id,
            day=payload.date,
            confidence=payload.confidence,
        )
    except PickRejected as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.reason) from exc
    return PickResponse.model_validate(pick)


@router.get("", response_model=list[PickResponse])
async def list_picks(
    username: str | None = Query(default=None),
    day: date | None = Query(default=None, alias="date"),
    store: InMemoryPickStore = Depends(get_pick_store),
) -> list[PickResponse]:
    if username and day:
        picks = await store.picks_by_user_and_date(username, day)
    elif username:
        picks = await store.picks_by_user(username)
    elif day:
        picks = await store.picks_by_date(day)
    else:
        picks = await store.all_picks()
    return [PickResponse.model_validate(p) for p in picks]
