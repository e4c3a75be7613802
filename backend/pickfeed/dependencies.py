from pickfeed.data_providers.espn import ESPNClient
from pickfeed.data_providers.ept_stats import EPTStatsClient
from pickfeed.data_providers.memory import InMemoryPickStore, InMemoryUserStore
from pickfeed.services.feed_service import FeedSources
from pickfeed.services.perf_cache import perf_cache

espn_client = ESPNClient()
ept_client = EPTStatsClient()
pick_store = InMemoryPickStore()
user_store = InMemoryUserStore()


def get_pick_store() -> InMemoryPickStore:
    return pick_store


def get_user_store() -> InMemoryUserStore:
    return user_store


def get_game_provider() -> ESPNClient:
    return espn_client


def get_ept_provider() -> EPTStatsClient:
    return ept_client


def get_feed_sources() -> FeedSources:
    return FeedSources(
        games=espn_client,
        picks=pick_store,
        box_scores=espn_client,
        news=espn_client,
        cache=perf_cache,
    )
