import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from pickfeed.api.v1.router import api_router
from pickfeed.config import settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger.info(
        "api startup: espn_base_url=%s feed_page_size=%s feed_max_lookback_days=%s",
        settings.espn_base_url,
        settings.feed_page_size,
        settings.feed_max_lookback_days,
    )
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.include_router(api_router, prefix="/api/v1")
