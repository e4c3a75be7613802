from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable, Mapping
from typing import Any

import httpx

from pickfeed.analytics.ept import EPTPlayer, nfl_group, season_label
from pickfeed.analytics.sport_rules import SPORT_RULES
from pickfeed.config import settings
from pickfeed.models.sport import Sport

logger = logging.getLogger(__name__)

UNKNOWN_TEAM = "-"

NBA_HEADSHOT = "https://cdn.nba.com/headshots/nba/latest/260x190/{player_id}.png"
MLB_HEADSHOT = (
    "https://img.mlbstatic.com/mlb-photos/image/upload/d_people:generic:headshot:67:current.png"
    "/w_213,q_auto:best/v1/people/{player_id}/headshot/67/current"
)
NHL_HEADSHOT = "https://assets.nhle.com/mugs/nhl/{season_id}/{team}/{player_id}.png"
NFL_HEADSHOT = "https://a.espncdn.com/i/headshots/nfl/players/full/{athlete_id}.png"

NBA_HEADERS = {
    "User-Agent": "Mozilla/5.0",
    "Accept": "application/json",
    "Referer": "https://www.nba.com/",
}

NFL_TEAMS = {
    1: "ATL", 2: "BUF", 3: "CHI", 4: "CIN", 5: "CLE", 6: "DAL", 7: "DEN", 8: "DET", 9: "GB", 10: "TEN",
    11: "IND", 12: "KC", 13: "LV", 14: "LAR", 15: "MIA", 16: "MIN", 17: "NE", 18: "NO", 19: "NYG", 20: "NYJ",
    21: "PHI", 22: "ARI", 23: "PIT", 24: "LAC", 25: "SF", 26: "SEA", 27: "TB", 28: "WSH", 29: "CAR", 30: "JAX",
    33: "BAL", 34: "HOU",
}

# leader category -> how many of its leaders to rank
NFL_LEADER_CATEGORIES = {
    "passingYards": 12,
    "rushingYards": 12,
    "receivingYards": 40,
    "receptions": 40,
    "receivingTouchdowns": 30,
    "totalTackles": 15,
    "sacks": 12,
    "interceptions": 10,
    "passesDefended": 10,
    "totalPoints": 10,
}

Score = Callable[[Mapping[str, float]], float]


class EPTUnavailable(Exception):
    """The upstream source needed to rank a sport returned nothing usable."""


def _num(raw: Any) -> float:
    try:
        return float(raw or 0)
    except (TypeError, ValueError):
        return 0.0


def _whole(value: float) -> float | int:
    return int(value) if float(value).is_integer() else value


def _per_game(total: float, games: float) -> float:
    return round(total / games, 1) if games else 0


def _pct(fraction: float) -> str:
    return f"{fraction * 100:.1f}%" if fraction else "-"


def parse_nba_leaders(payload: dict[str, Any], score: Score) -> list[EPTPlayer]:
    result = payload.get("resultSet") or {}
    headers = result.get("headers") or []
    players = []
    for row in result.get("rowSet") or []:
        r = dict(zip(headers, row))
        totals = {label: _num(r.get(label)) for label in ("GP", "PTS", "REB", "AST", "STL", "BLK", "TOV")}
        gp = totals["GP"]
        players.append(
            EPTPlayer(
                name=str(r.get("PLAYER") or ""),
                team=str(r.get("TEAM") or UNKNOWN_TEAM),
                ept=score(totals),
                image_url=NBA_HEADSHOT.format(player_id=r.get("PLAYER_ID")),
                stats={
                    "GP": _whole(gp),
                    "PPG": _per_game(totals["PTS"], gp),
                    "RPG": _per_game(totals["REB"], gp),
                    "APG": _per_game(totals["AST"], gp),
                    "SPG": _per_game(totals["STL"], gp),
                    "BPG": _per_game(totals["BLK"], gp),
                    "FG%": _pct(_num(r.get("FG_PCT"))),
                    "3P%": _pct(_num(r.get("FG3_PCT"))),
                    "FT%": _pct(_num(r.get("FT_PCT"))),
                },
            )
        )
    return players


def _mlb_splits(payload: dict[str, Any]) -> list[dict[str, Any]]:
    stats = payload.get("stats") or []
    return (stats[0].get("splits") or []) if stats else []


def _mlb_player(split: dict[str, Any], ept: float, stats: dict[str, float | str]) -> EPTPlayer:
    player = split.get("player") or {}
    return EPTPlayer(
        name=player.get("fullName") or "",
        team=(split.get("team") or {}).get("name") or UNKNOWN_TEAM,
        ept=ept,
        image_url=MLB_HEADSHOT.format(player_id=player.get("id")),
        stats=stats,
    )


def parse_mlb_hitters(payload: dict[str, Any], score: Score) -> list[EPTPlayer]:
    players = []
    for split in _mlb_splits(payload):
        st = split.get("stat") or {}
        totals = {
            "H": _num(st.get("hits")),
            "HR": _num(st.get("homeRuns")),
            "RBI": _num(st.get("rbi")),
            "R": _num(st.get("runs")),
            "SB": _num(st.get("stolenBases")),
            "BB": _num(st.get("baseOnBalls")),
        }
        stats: dict[str, float | str] = {"G": _whole(_num(st.get("gamesPlayed"))), "AVG": st.get("avg") or ".000"}
        stats.update({label: _whole(value) for label, value in totals.items()})
        stats["OPS"] = st.get("ops") or ".000"
        players.append(_mlb_player(split, score(totals), stats))
    return players


def parse_mlb_pitchers(payload: dict[str, Any], score: Score) -> list[EPTPlayer]:
    players = []
    for split in _mlb_splits(payload):
        st = split.get("stat") or {}
        innings = str(st.get("inningsPitched") or "0")
        totals = {
            "W": _num(st.get("wins")),
            "L": _num(st.get("losses")),
            "SO": _num(st.get("strikeOuts")),
            "ER": _num(st.get("earnedRuns")),
            "BB": _num(st.get("baseOnBalls")),
            "SV": _num(st.get("saves")),
            "IP": _num(innings),
        }
        stats: dict[str, float | str] = {
            "G": _whole(_num(st.get("gamesPlayed"))),
            "W": _whole(totals["W"]),
            "L": _whole(totals["L"]),
            "ERA": st.get("era") or "0.00",
            "SO": _whole(totals["SO"]),
            "SV": _whole(totals["SV"]),
            "IP": innings,
            "WHIP": st.get("whip") or "0.00",
        }
        players.append(_mlb_player(split, score(totals), stats))
    return players


def nhl_season_id(start_year: int) -> str:
    return f"{start_year}{start_year + 1}"


def parse_nhl_skaters(payload: dict[str, Any], season_id: str, score: Score) -> list[EPTPlayer]:
    players = []
    for row in payload.get("data") or []:
        team = row.get("teamAbbrevs") or ""
        totals = {
            "G": _num(row.get("goals")),
            "A": _num(row.get("assists")),
            "+/-": _num(row.get("plusMinus")),
            "PIM": _num(row.get("penaltyMinutes")),
            "PPG": _num(row.get("ppGoals")),
            "SHG": _num(row.get("shGoals")),
            "GWG": _num(row.get("gameWinningGoals")),
            "SOG": _num(row.get("shots")),
        }
        players.append(
            EPTPlayer(
                name=row.get("skaterFullName") or "",
                team=team or UNKNOWN_TEAM,
                ept=score(totals),
                image_url=NHL_HEADSHOT.format(season_id=season_id, team=team or "NHL", player_id=row.get("playerId")),
                stats={
                    "GP": _whole(_num(row.get("gamesPlayed"))),
                    "G": _whole(totals["G"]),
                    "A": _whole(totals["A"]),
                    "PTS": _whole(_num(row.get("points"))),
                    "+/-": _whole(totals["+/-"]),
                    "PIM": _whole(totals["PIM"]),
                    "PPG": _whole(totals["PPG"]),
                    "SOG": _whole(totals["SOG"]),
                },
            )
        )
    return players


def parse_nhl_goalies(payload: dict[str, Any], season_id: str, score: Score) -> list[EPTPlayer]:
    players = []
    for row in payload.get("data") or []:
        team = row.get("teamAbbrevs") or ""
        losses = _num(row.get("losses"))
        ot_losses = _num(row.get("otLosses"))
        gaa = _num(row.get("goalsAgainstAverage"))
        save_pct = _num(row.get("savePctg"))
        totals = {
            "W": _num(row.get("wins")),
            "L": losses + ot_losses,
            "GAA": gaa,
            "SV%": save_pct,
            "SO": _num(row.get("shutouts")),
            "SV": _num(row.get("saves")),
        }
        players.append(
            EPTPlayer(
                name=row.get("goalieFullName") or "",
                team=team or UNKNOWN_TEAM,
                ept=score(totals),
                image_url=NHL_HEADSHOT.format(season_id=season_id, team=team or "NHL", player_id=row.get("playerId")),
                stats={
                    "GP": _whole(_num(row.get("gamesPlayed"))),
                    "W": _whole(totals["W"]),
                    "L": _whole(losses),
                    "OTL": _whole(ot_losses),
                    "GAA": round(gaa, 2),
                    "SV%": round(save_pct * 100, 1),
                    "SO": _whole(totals["SO"]),
                    "SV": _whole(totals["SV"]),
                },
            )
        )
    return players


def _ref_id(ref: str | None, marker: str) -> str:
    if not ref or marker not in ref:
        return ""
    return ref.split(marker, 1)[1].split("?", 1)[0]


def parse_nfl_leader_ids(payload: dict[str, Any]) -> dict[str, str]:
    """Athlete id -> team id for the top leaders of each ranked category, in first-seen order."""
    athletes: dict[str, str] = {}
    for category in payload.get("categories") or []:
        limit = NFL_LEADER_CATEGORIES.get(category.get("name"))
        if not limit:
            continue
        for leader in (category.get("leaders") or [])[:limit]:
            athlete_id = _ref_id((leader.get("athlete") or {}).get("$ref"), "/athletes/")
            team_id = _ref_id((leader.get("team") or {}).get("$ref"), "/teams/")
            if not athlete_id:
                continue
            if athlete_id not in athletes or team_id:
                athletes[athlete_id] = team_id
    return athletes


def _nfl_categories(stats_payload: dict[str, Any]) -> dict[str, dict[str, float]]:
    categories = ((stats_payload.get("splits") or {}).get("categories")) or []
    return {
        c.get("name"): {s.get("name"): _num(s.get("value")) for s in c.get("stats") or []}
        for c in categories
    }


def parse_nfl_athlete(
    athlete_id: str,
    team_id: str,
    bio: dict[str, Any],
    stats_payload: dict[str, Any],
    score_for: Callable[[str], Score],
) -> tuple[str, EPTPlayer] | None:
    """Rank group and player for one athlete, or None when the position is not ranked."""
    categories = _nfl_categories(stats_payload)
    if not categories:
        return None
    gen = categories.get("general", {})
    passing = categories.get("passing", {})
    rushing = categories.get("rushing", {})
    receiving = categories.get("receiving", {})
    defensive = categories.get("defensive", {})
    kicking = categories.get("kicking", {})

    position = (bio.get("position") or {}).get("abbreviation") or "?"
    group = nfl_group(position, passing.get("passingYards", 0))
    if group is None:
        return None

    gp = (
        gen.get("gamesPlayed")
        or passing.get("teamGamesPlayed")
        or rushing.get("teamGamesPlayed")
        or defensive.get("teamGamesPlayed", 0)
    )
    display: dict[str, float | str]
    if group == "qb":
        totals = {
            "PASS YDS": passing.get("passingYards", 0),
            "PASS TD": passing.get("passingTouchdowns", 0),
            "INT": passing.get("interceptions", 0),
            "RUSH YDS": rushing.get("rushingYards", 0),
            "RUSH TD": rushing.get("rushingTouchdowns", 0),
        }
        display = {label: _whole(totals[label]) for label in ("PASS YDS", "PASS TD", "INT", "RUSH YDS")}
        display["RTG"] = round(passing.get("QBRating", 0), 1)
    elif group in ("rb", "wr", "te"):
        totals = {
            "RUSH YDS": rushing.get("rushingYards", 0),
            "REC YDS": receiving.get("receivingYards", 0),
            "TD": rushing.get("rushingTouchdowns", 0) + receiving.get("receivingTouchdowns", 0),
            "REC": receiving.get("receptions", 0),
            "FUM": gen.get("fumbles") or gen.get("fumblesLost", 0),
        }
        shown = ("RUSH YDS", "REC YDS", "TD", "REC") if group == "rb" else ("REC", "REC YDS", "TD")
        display = {label: _whole(totals[label]) for label in shown}
    elif group == "def":
        totals = {
            "TKL": defensive.get("totalTackles", 0),
            "SACK": round(defensive.get("sacks", 0), 1),
            "INT": categories.get("defensiveInterceptions", {}).get("interceptions", 0),
            "TFL": defensive.get("tacklesForLoss") or defensive.get("stuffs", 0),
            "FF": gen.get("fumblesForced", 0),
            "PD": defensive.get("passesDefended") or defensive.get("passesBattedDown", 0),
            "DEF TD": defensive.get("miscTouchdowns", 0),
        }
        display = {label: _whole(totals[label]) for label in ("TKL", "SACK", "INT", "TFL", "FF", "PD")}
    else:
        totals = {
            "FGM": kicking.get("fieldGoalsMade", 0),
            "FGA": kicking.get("fieldGoalAttempts") or kicking.get("fieldGoalsAttempted", 0),
            "XPM": kicking.get("extraPointsMade", 0),
            "LONG FG": kicking.get("longFieldGoalMade", 0),
        }
        display = {label: _whole(totals[label]) for label in ("FGM", "FGA", "XPM", "LONG FG")}

    player = EPTPlayer(
        name=bio.get("displayName") or "Unknown",
        team=NFL_TEAMS.get(int(team_id), UNKNOWN_TEAM) if team_id.isdigit() else UNKNOWN_TEAM,
        ept=score_for(group)(totals),
        image_url=NFL_HEADSHOT.format(athlete_id=athlete_id),
        stats={"GP": _whole(gp), **display},
    )
    return group, player


class EPTStatsClient:
    """Season stat totals for EPT rankings from each league's public stats API."""

    def __init__(self, timeout: float | None = None, batch_size: int | None = None) -> None:
        self.timeout = timeout or settings.http_timeout_seconds
        self.batch_size = batch_size or settings.ept_batch_size

    async def _get(
        self, url: str, params: dict[str, Any] | None = None, headers: dict[str, str] | None = None
    ) -> dict[str, Any]:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.get(url, params=params or {}, headers=headers)
            response.raise_for_status()
            data = response.json()
            return data if isinstance(data, dict) else {}

    async def _get_or_empty(self, url: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        try:
            return await self._get(url, params=params)
        except Exception:
            logger.exception("EPT stats fetch failed; ranking group left empty: url=%s", url)
            return {}

    async def fetch_ept_players(self, sport: Sport, season_start: int) -> dict[str, list[EPTPlayer]]:
        """Unranked players per EPT group for the season starting in ``season_start``."""
        fetchers = {
            Sport.NBA: self._fetch_nba,
            Sport.MLB: self._fetch_mlb,
            Sport.NHL: self._fetch_nhl,
            Sport.NFL: self._fetch_nfl,
        }
        return await fetchers[sport](season_start)

    async def _fetch_nba(self, season_start: int) -> dict[str, list[EPTPlayer]]:
        rules = SPORT_RULES[Sport.NBA]
        season = season_label(season_start, rules.season_spans_years)
        payload = await self._get(
            settings.nba_stats_url,
            params={
                "ActiveFlag": "",
                "LeagueID": "00",
                "PerMode": "Totals",
                "Scope": "S",
                "Season": season,
                "SeasonType": "Regular Season",
                "StatCategory": "PTS",
            },
            headers=NBA_HEADERS,
        )
        return {"all": parse_nba_leaders(payload, rules.ept_group("all").score)}

    async def _fetch_mlb(self, season_start: int) -> dict[str, list[EPTPlayer]]:
        rules = SPORT_RULES[Sport.MLB]
        common = {"stats": "season", "season": season_start, "limit": settings.ept_player_limit, "sportId": 1}
        hitting, pitching = await asyncio.gather(
            self._get_or_empty(
                settings.mlb_stats_url, {**common, "group": "hitting", "sortStat": "hits", "order": "desc"}
            ),
            self._get_or_empty(
                settings.mlb_stats_url, {**common, "group": "pitching", "sortStat": "earnedRunAverage", "order": "asc"}
            ),
        )
        return {
            "hitting": parse_mlb_hitters(hitting, rules.ept_group("hitting").score),
            "pitching": parse_mlb_pitchers(pitching, rules.ept_group("pitching").score),
        }

    async def _fetch_nhl(self, season_start: int) -> dict[str, list[EPTPlayer]]:
        rules = SPORT_RULES[Sport.NHL]
        season_id = nhl_season_id(season_start)

        def params(sort_by: str, limit: int) -> dict[str, Any]:
            return {
                "isAggregate": "false",
                "isGame": "false",
                "sort": json.dumps([{"property": sort_by, "direction": "DESC"}]),
                "start": 0,
                "limit": limit,
                "cayenneExp": f"seasonId<={season_id} and seasonId>={season_id} and gameTypeId=2",
            }

        base = settings.nhl_stats_url.rstrip("/")
        skaters, goalies = await asyncio.gather(
            self._get_or_empty(f"{base}/skater/summary", params("points", settings.ept_player_limit)),
            self._get_or_empty(f"{base}/goalie/summary", params("wins", settings.ept_player_limit // 2)),
        )
        return {
            "skaters": parse_nhl_skaters(skaters, season_id, rules.ept_group("skaters").score),
            "goalies": parse_nhl_goalies(goalies, season_id, rules.ept_group("goalies").score),
        }

    async def _get_optional(self, url: str) -> dict[str, Any] | None:
        try:
            return await self._get(url)
        except Exception as exc:
            logger.warning("NFL stats fetch failed: url=%s error=%s", url, exc)
            return None

    async def _fetch_nfl(self, season_start: int) -> dict[str, list[EPTPlayer]]:
        rules = SPORT_RULES[Sport.NFL]
        base = settings.nfl_core_url.rstrip("/")
        season_path = f"{base}/seasons/{season_start}/types/2"

        leaders = await self._get_optional(f"{season_path}/leaders?limit=50")
        if not leaders or not leaders.get("categories"):
            raise EPTUnavailable("could not fetch NFL stat leaders")

        athletes = parse_nfl_leader_ids(leaders)
        groups: dict[str, list[EPTPlayer]] = {g.name: [] for g in rules.ept_groups}
        ids = list(athletes)
        for start in range(0, len(ids), self.batch_size):
            batch = ids[start : start + self.batch_size]
            results = await asyncio.gather(
                *(
                    self._get_optional(url)
                    for athlete_id in batch
                    for url in (f"{base}/athletes/{athlete_id}", f"{season_path}/athletes/{athlete_id}/statistics/0")
                )
            )
            for i, athlete_id in enumerate(batch):
                bio, stats_payload = results[2 * i], results[2 * i + 1]
                if not bio or not stats_payload:
                    continue
                parsed = parse_nfl_athlete(
                    athlete_id, athletes[athlete_id], bio, stats_payload, lambda name: rules.ept_group(name).score
                )
                if parsed is not None:
                    group, player = parsed
                    groups[group].append(player)
        return groups
