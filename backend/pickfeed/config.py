from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "PickFeed"
    espn_base_url: str = "https://site.api.espn.com/apis/site/v2/sports"
    http_timeout_seconds: float = 20.0

    nba_stats_url: str = "https://stats.nba.com/stats/leagueLeaders"
    mlb_stats_url: str = "https://statsapi.mlb.com/api/v1/stats"
    nhl_stats_url: str = "https://api.nhle.com/stats/rest/en"
    nfl_core_url: str = "https://sports.core.api.espn.com/v2/sports/football/leagues/nfl"
    ept_player_limit: int = 200
    ept_batch_size: int = 20

    feed_page_size: int = 5
    feed_max_lookback_days: int = 50
    feed_max_player_posts: int = 20
    news_articles_per_sport: int = 5

    max_daily_picks: int = 3
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", env_prefix="PICKFEED_")


settings = Settings()
