from fastapi import APIRouter

from pickfeed.api.v1.badges import router as badges_router
from pickfeed.api.v1.ept import router as ept_router
from pickfeed.api.v1.feed import router as feed_router
from pickfeed.api.v1.leaderboard import router as leaderboard_router
from pickfeed.api.v1.picks import router as picks_router
from pickfeed.api.v1.settlement import router as settlement_router
from pickfeed.api.v1.system import router as system_router

api_router = APIRouter()
api_router.include_router(feed_router)
api_router.include_router(badges_router)
api_router.include_router(picks_router)
api_router.include_router(settlement_router)
api_router.include_router(leaderboard_router)
api_router.include_router(ept_router)
api_router.include_router(system_router)
