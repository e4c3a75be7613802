from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from pickfeed.data_providers.base import EPTProvider
from pickfeed.dependencies import get_ept_provider
from pickfeed.models.sport import Sport
from pickfeed.services.ept_service import get_ept_rankings, rankings_to_dict

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ept", tags=["ept"])


@router.get("")
async def ept_rankings(
    sport: Sport = Query(default=Sport.NBA),
    provider: EPTProvider = Depends(get_ept_provider),
) -> dict:
    try:
        rankings = await get_ept_rankings(sport, provider)
    except Exception as exc:
        logger.exception("ept rankings failed: sport=%s", sport.value)
        raise HTTPException(
            status_code=500, detail=f"Failed to fetch {sport.value.upper()} EPT rankings"
        ) from exc
    return rankings_to_dict(rankings)
