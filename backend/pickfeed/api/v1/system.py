from fastapi import APIRouter

from pickfeed.config import settings
from pickfeed.services.perf_cache import perf_cache

router = APIRouter(prefix="/system", tags=["system"])


@router.get("/health")
async def health() -> dict[str, str | int]:
    return {
        "status": "ok",
        "app_name": settings.app_name,
        "perf_cache_entries": len(perf_cache),
    }
