from __future__ import annotations

import asyncio
import logging
from datetime import UTC, date, datetime
from typing import Any

import httpx

from pickfeed.analytics.sport_rules import SPORT_RULES
from pickfeed.config import settings
from pickfeed.models.box_score import BoxScoreAthlete, TeamBoxScore
from pickfeed.models.game import Game, GameStatus, Team
from pickfeed.models.news import NewsArticle
from pickfeed.models.sport import Sport

logger = logging.getLogger(__name__)

STATE_TO_STATUS = {
    "pre": GameStatus.SCHEDULED,
    "in": GameStatus.IN_PROGRESS,
    "post": GameStatus.FINAL,
}


def _parse_time(raw: str | None) -> datetime | None:
    if not raw:
        return None
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def _parse_score(raw: Any) -> int | None:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def _parse_team(competitor: dict[str, Any]) -> Team:
    team = competitor.get("team") or {}
    records = competitor.get("records") or []
    return Team(
        id=str(team.get("id", "")),
        name=team.get("name") or team.get("displayName") or "",
        display_name=team.get("displayName") or team.get("name") or "",
        abbreviation=team.get("abbreviation") or "",
        logo=team.get("logo") or "",
        record=(records[0].get("summary") if records else None) or "0-0",
    )


def parse_scoreboard(payload: dict[str, Any], sport: Sport, day: date) -> list[Game]:
    games: list[Game] = []
    for event in payload.get("events") or []:
        competitions = event.get("competitions") or []
        if not competitions:
            continue
        competitors = competitions[0].get("competitors") or []
        home = next((c for c in competitors if c.get("homeAway") == "home"), None)
        away = next((c for c in competitors if c.get("homeAway") == "away"), None)
        start_time = _parse_time(event.get("date"))
        if home is None or away is None or start_time is None:
            logger.warning("skipping malformed scoreboard event: sport=%s event_id=%s", sport.value, event.get("id"))
            continue

        state = ((event.get("status") or {}).get("type") or {}).get("state", "pre")
        status = STATE_TO_STATUS.get(state, GameStatus.SCHEDULED)
        scored = status != GameStatus.SCHEDULED
        games.append(
            Game(
                id=str(event.get("id")),
                sport=sport,
                date=day,
                home_team=_parse_team(home),
                away_team=_parse_team(away),
                start_time=start_time,
                status=status,
                home_score=_parse_score(home.get("score")) if scored else None,
                away_score=_parse_score(away.get("score")) if scored else None,
            )
        )
    return games


def parse_box_score(payload: dict[str, Any]) -> list[TeamBoxScore] | None:
    players = (payload.get("boxscore") or {}).get("players")
    if not players:
        return None

    teams: list[TeamBoxScore] = []
    for team_stats in players:
        statistics = team_stats.get("statistics") or []
        if not statistics:
            continue
        block = statistics[0]
        athletes = []
        for row in block.get("athletes") or []:
            athlete = row.get("athlete") or {}
            athletes.append(
                BoxScoreAthlete(
                    id=str(athlete.get("id", "")),
                    display_name=athlete.get("displayName") or "",
                    stats=[str(v) for v in row.get("stats") or []],
                    headshot_url=(athlete.get("headshot") or {}).get("href"),
                )
            )
        teams.append(
            TeamBoxScore(
                team_abbreviation=(team_stats.get("team") or {}).get("abbreviation") or "",
                labels=list(block.get("labels") or []),
                athletes=athletes,
            )
        )
    return teams


def parse_news(payload: dict[str, Any], sport: Sport) -> list[NewsArticle]:
    articles: list[NewsArticle] = []
    for item in payload.get("articles") or []:
        published = _parse_time(item.get("published"))
        headline = item.get("headline")
        if not headline or published is None:
            continue
        images = item.get("images") or []
        articles.append(
            NewsArticle(
                headline=headline,
                published=published,
                sport=sport,
                description=item.get("description") or "",
                link=((item.get("links") or {}).get("web") or {}).get("href") or "",
                image_url=images[0].get("url") if images else None,
            )
        )
    return articles


class ESPNClient:
    """Games, box scores and news from the public ESPN site API."""

    def __init__(self, base_url: str | None = None, timeout: float | None = None) -> None:
        self.base_url = (base_url or settings.espn_base_url).rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds

    async def _get(self, sport: Sport, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        league_path = SPORT_RULES[sport].league_path
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.get(f"{self.base_url}/{league_path}/{path.lstrip('/')}", params=params or {})
            response.raise_for_status()
            data = response.json()
            return data if isinstance(data, dict) else {}

    async def fetch_games_for_sport(self, sport: Sport, day: date) -> list[Game]:
        try:
            payload = await self._get(sport, "scoreboard", params={"dates": day.strftime("%Y%m%d")})
        except Exception:
            logger.exception("Failed to fetch scoreboard for sport %s on %s", sport.value, day.isoformat())
            return []
        return parse_scoreboard(payload, sport, day)

    async def fetch_games(self, day: date) -> list[Game]:
        batches = await asyncio.gather(*(self.fetch_games_for_sport(sport, day) for sport in Sport))
        return [game for batch in batches for game in batch]

    async def fetch_box_score(self, sport: Sport, game_id: str) -> list[TeamBoxScore] | None:
        # fetch errors propagate; None only means the summary has no box score
        payload = await self._get(sport, "summary", params={"event": game_id})
        return parse_box_score(payload)

    async def fetch_news(self, sport: Sport) -> list[NewsArticle]:
        try:
            payload = await self._get(sport, "news")
        except Exception:
            logger.exception("Failed to fetch news for sport %s", sport.value)
            return []
        return parse_news(payload, sport)
