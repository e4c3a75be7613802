from __future__ import annotations

from datetime import date
from typing import Protocol

from pickfeed.analytics.ept import EPTPlayer
from pickfeed.models.box_score import TeamBoxScore
from pickfeed.models.game import Game
from pickfeed.models.news import NewsArticle
from pickfeed.models.pick import Pick
from pickfeed.models.sport import Sport


class GameProvider(Protocol):
    async def fetch_games(self, day: date) -> list[Game]: ...


class BoxScoreProvider(Protocol):
    async def fetch_box_score(self, sport: Sport, game_id: str) -> list[TeamBoxScore] | None: ...


class NewsProvider(Protocol):
    async def fetch_news(self, sport: Sport) -> list[NewsArticle]: ...


class EPTProvider(Protocol):
    async def fetch_ept_players(self, sport: Sport, season_start: int) -> dict[str, list[EPTPlayer]]: ...


class PickProvider(Protocol):
    async def picks_by_date(self, day: date) -> list[Pick]: ...

    async def picks_by_user(self, username: str) -> list[Pick]: ...

    async def picks_by_user_and_date(self, username: str, day: date) -> list[Pick]: ...
