from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter

from pickfeed.analytics.badges import badge_definitions

router = APIRouter(prefix="/badges", tags=["badges"])


@router.get("")
async def list_badges() -> list[dict]:
    return [asdict(d) for d in badge_definitions()]
