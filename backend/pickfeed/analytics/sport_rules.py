from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date

from pickfeed.analytics import ept
from pickfeed.models.sport import Sport

StatMap = dict[str, float]

HEADSHOT_URL = "https://a.espncdn.com/i/headshots/{league}/players/full/{athlete_id}.png"


@dataclass(frozen=True)
class PointsFormula:
    base: int = 10
    upset_bonus: int = 5
    heavy_upset_bonus: int = 10
    heavy_upset_margin: int = 5
    streak_multiplier: int = 2
    streak_minimum: int = 2

    def streak_bonus(self, current_streak: int) -> int:
        if current_streak < self.streak_minimum:
            return 0
        return current_streak * self.streak_multiplier


DEFAULT_POINTS = PointsFormula()


@dataclass(frozen=True)
class EPTGroup:
    name: str
    formula: str
    score: Callable[[ept.EPTStats], float]


def _format_stat(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:g}"


@dataclass(frozen=True)
class SportRules:
    league_path: str
    # any single (label, minimum) pair met makes a standout
    standout_thresholds: tuple[tuple[str, float], ...]
    # (label, minimum); None means "shown when non-zero"
    headline_stats: tuple[tuple[str, float | None], ...]
    combo_standout: Callable[[StatMap], bool] | None = None
    points: PointsFormula = DEFAULT_POINTS
    ept_groups: tuple[EPTGroup, ...] = ()
    # 1-based month the regular season opens in
    season_start_month: int = 1
    season_spans_years: bool = False

    @property
    def league(self) -> str:
        return self.league_path.rsplit("/", 1)[-1]

    def is_standout(self, stats: StatMap) -> bool:
        for label, minimum in self.standout_thresholds:
            if stats.get(label, 0) >= minimum:
                return True
        return bool(self.combo_standout and self.combo_standout(stats))

    def headline(self, stats: StatMap) -> str:
        parts = []
        for label, minimum in self.headline_stats:
            value = stats.get(label)
            if not value:
                continue
            if minimum is not None and value < minimum:
                continue
            parts.append(f"{_format_stat(value)} {label}")
        return " | ".join(parts) or "Great Game"

    def headshot_url(self, athlete_id: str) -> str:
        return HEADSHOT_URL.format(league=self.league, athlete_id=athlete_id)

    def ept_group(self, name: str) -> EPTGroup:
        return next(g for g in self.ept_groups if g.name == name)

    def ept_formula(self) -> dict[str, str]:
        return {g.name: g.formula for g in self.ept_groups}

    def season(self, today: date) -> tuple[int, str]:
        """Start year and display label of the season in progress (or last finished) on ``today``."""
        start = ept.season_start(today, self.season_start_month)
        return start, ept.season_label(start, self.season_spans_years)


def _nba_double_double_scorer(stats: StatMap) -> bool:
    return stats.get("PTS", 0) >= 25 and (stats.get("REB", 0) >= 10 or stats.get("AST", 0) >= 10)


_SKILL_FORMULA = "EPT = (Rush YDS × 0.1) + (Rec YDS × 0.1) + (TD × 6) + (REC × 0.5) - (FUM × 4)"

SPORT_RULES: dict[Sport, SportRules] = {
    Sport.NBA: SportRules(
        league_path="basketball/nba",
        standout_thresholds=(("PTS", 30), ("REB", 15), ("AST", 12)),
        headline_stats=(("PTS", None), ("REB", None), ("AST", None), ("STL", 3), ("BLK", 3)),
        combo_standout=_nba_double_double_scorer,
        ept_groups=(
            EPTGroup(
                "all",
                "EPT = (PTS × 1.5) + (REB × 1.5) + (AST × 1.5) + (STL × 3) + (BLK × 3) - (TOV × 1.5)",
                ept.nba_ept,
            ),
        ),
        season_start_month=10,
        season_spans_years=True,
    ),
    Sport.NFL: SportRules(
        league_path="football/nfl",
        standout_thresholds=(("YDS", 300), ("TD", 3)),
        headline_stats=(("YDS", None), ("TD", None)),
        ept_groups=(
            EPTGroup(
                "qb",
                "EPT = (Pass YDS × 0.04) + (Pass TD × 6) - (INT × 4) + (Rush YDS × 0.1) + (Rush TD × 6)",
                ept.quarterback_ept,
            ),
            EPTGroup("rb", _SKILL_FORMULA, ept.skill_position_ept),
            EPTGroup("wr", _SKILL_FORMULA, ept.skill_position_ept),
            EPTGroup("te", _SKILL_FORMULA, ept.skill_position_ept),
            EPTGroup(
                "def",
                "EPT = (TKL × 1) + (SACK × 4) + (INT × 6) + (TFL × 2) + (FF × 4) + (PD × 2) + (DEF TD × 6)",
                ept.defense_ept,
            ),
            EPTGroup("k", "EPT = (FGM × 3) + (XPM × 1) + (Long FG × 0.1) - ((FGA - FGM) × 2)", ept.kicker_ept),
        ),
        season_start_month=9,
    ),
    Sport.NHL: SportRules(
        league_path="hockey/nhl",
        standout_thresholds=(("G", 3),),
        headline_stats=(("G", None), ("A", None)),
        ept_groups=(
            EPTGroup(
                "skaters",
                "EPT = (G × 3) + (A × 2) + (+/- × 0.5) + (PPG × 1.5) + (SHG × 3) + (GWG × 2) + (SOG × 0.1) - (PIM × 0.3)",
                ept.skater_ept,
            ),
            EPTGroup(
                "goalies",
                "EPT = (W × 5) - (L × 2) - (GAA × 3) + (SV% × 50) + (SO × 8) + (SV × 0.05)",
                ept.goalie_ept,
            ),
        ),
        season_start_month=10,
        season_spans_years=True,
    ),
    Sport.MLB: SportRules(
        league_path="baseball/mlb",
        standout_thresholds=(("HR", 3), ("RBI", 5)),
        headline_stats=(("HR", None), ("RBI", None), ("H", None)),
        ept_groups=(
            EPTGroup(
                "hitting",
                "EPT = (H × 1.5) + (HR × 4) + (RBI × 1.5) + (R × 1.5) + (SB × 3) + (BB × 1)",
                ept.hitter_ept,
            ),
            EPTGroup(
                "pitching",
                "EPT = (W × 8) + (SO × 0.5) + (SV × 5) - (L × 4) - (ER × 0.8) + (IP × 0.5) - (BB × 0.5)",
                ept.pitcher_ept,
            ),
        ),
        season_start_month=4,
    ),
}


def rules_for(sport: Sport | str) -> SportRules:
    return SPORT_RULES[Sport(sport)]
