"""EPT (estimated points total) fantasy-style player rankings.

Every formula takes a mapping of season totals keyed by short stat labels
and returns a score rounded to one decimal. Missing stats count as zero.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import date, datetime

from pickfeed.models.sport import Sport

EPTStats = Mapping[str, float]

NFL_DEFENSIVE_POSITIONS = frozenset({"DE", "DT", "LB", "ILB", "OLB", "MLB", "CB", "SS", "FS", "S", "DB", "NT", "DL"})


@dataclass
class EPTPlayer:
    name: str
    team: str
    ept: float
    stats: dict[str, float | str] = field(default_factory=dict)
    image_url: str | None = None
    rank: int = 0


@dataclass
class EPTRankings:
    sport: Sport
    season: str
    groups: dict[str, list[EPTPlayer]]
    formula: dict[str, str]
    updated_at: datetime


def _weighted(stats: EPTStats, weights: Mapping[str, float]) -> float:
    return round(sum(float(stats.get(label) or 0) * weight for label, weight in weights.items()), 1)


def nba_ept(stats: EPTStats) -> float:
    return _weighted(stats, {"PTS": 1.5, "REB": 1.5, "AST": 1.5, "STL": 3, "BLK": 3, "TOV": -1.5})


def hitter_ept(stats: EPTStats) -> float:
    return _weighted(stats, {"H": 1.5, "HR": 4, "RBI": 1.5, "R": 1.5, "SB": 3, "BB": 1})


def pitcher_ept(stats: EPTStats) -> float:
    return _weighted(stats, {"W": 8, "SO": 0.5, "SV": 5, "L": -4, "ER": -0.8, "IP": 0.5, "BB": -0.5})


def skater_ept(stats: EPTStats) -> float:
    return _weighted(
        stats, {"G": 3, "A": 2, "+/-": 0.5, "PPG": 1.5, "SHG": 3, "GWG": 2, "SOG": 0.1, "PIM": -0.3}
    )


def goalie_ept(stats: EPTStats) -> float:
    # L includes overtime losses; SV% is a 0-1 fraction
    return _weighted(stats, {"W": 5, "L": -2, "GAA": -3, "SV%": 50, "SO": 8, "SV": 0.05})


def quarterback_ept(stats: EPTStats) -> float:
    return _weighted(stats, {"PASS YDS": 0.04, "PASS TD": 6, "INT": -4, "RUSH YDS": 0.1, "RUSH TD": 6})


def skill_position_ept(stats: EPTStats) -> float:
    return _weighted(stats, {"RUSH YDS": 0.1, "REC YDS": 0.1, "TD": 6, "REC": 0.5, "FUM": -4})


def defense_ept(stats: EPTStats) -> float:
    return _weighted(stats, {"TKL": 1, "SACK": 4, "INT": 6, "TFL": 2, "FF": 4, "PD": 2, "DEF TD": 6})


def kicker_ept(stats: EPTStats) -> float:
    misses = float(stats.get("FGA") or 0) - float(stats.get("FGM") or 0)
    return _weighted({**stats, "MISSED FG": misses}, {"FGM": 3, "XPM": 1, "LONG FG": 0.1, "MISSED FG": -2})


def nfl_group(position: str, passing_yards: float = 0) -> str | None:
    """Ranking group for an NFL position; quarterbacks need passing yards to count."""
    if position == "QB":
        return "qb" if passing_yards > 0 else None
    if position in ("RB", "FB"):
        return "rb"
    if position == "WR":
        return "wr"
    if position == "TE":
        return "te"
    if position in NFL_DEFENSIVE_POSITIONS:
        return "def"
    if position in ("K", "PK"):
        return "k"
    return None


def rank_players(players: list[EPTPlayer]) -> list[EPTPlayer]:
    """Highest EPT first, ranked from 1. Equal scores keep their incoming order."""
    ordered = sorted(players, key=lambda p: p.ept, reverse=True)
    return [replace(p, rank=i + 1) for i, p in enumerate(ordered)]


def season_start(today: date, start_month: int) -> int:
    return today.year if today.month >= start_month else today.year - 1


def season_label(start_year: int, spans_years: bool) -> str:
    if spans_years:
        return f"{start_year}-{(start_year + 1) % 100:02d}"
    return str(start_year)


def build_rankings(
    sport: Sport,
    season: str,
    groups: Mapping[str, list[EPTPlayer]],
    formula: Mapping[str, str],
    now: datetime,
) -> EPTRankings:
    # every group named by the formula table is present, even when empty
    ranked = {name: rank_players(list(groups.get(name, []))) for name in formula}
    return EPTRankings(sport=sport, season=season, groups=ranked, formula=dict(formula), updated_at=now)
