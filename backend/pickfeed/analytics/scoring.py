from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict, dataclass

from pickfeed.analytics.outcome import resolve_winner
from pickfeed.analytics.sport_rules import DEFAULT_POINTS, SPORT_RULES, PointsFormula
from pickfeed.models.game import Game
from pickfeed.models.pick import Pick, PickResult
from pickfeed.utils.records import parse_record

PERFECT_NIGHT_MIN_PICKS = 3


@dataclass(frozen=True)
class UpsetCheck:
    is_upset: bool
    is_heavy: bool


@dataclass(frozen=True)
class PointsBreakdown:
    base: int
    upset_bonus: int
    streak_bonus: int
    total: int


NO_POINTS = PointsBreakdown(base=0, upset_bonus=0, streak_bonus=0, total=0)


def _formula_for(game: Game) -> PointsFormula:
    rules = SPORT_RULES.get(game.sport)
    return rules.points if rules else DEFAULT_POINTS


def is_upset(game: Game, picked_team_id: str) -> UpsetCheck:
    home = parse_record(game.home_team.record)
    away = parse_record(game.away_team.record)

    picked_home = picked_team_id == game.home_team.id
    picked_wins = home.wins if picked_home else away.wins
    opponent_wins = away.wins if picked_home else home.wins

    if picked_wins < opponent_wins:
        heavy_margin = _formula_for(game).heavy_upset_margin
        return UpsetCheck(is_upset=True, is_heavy=opponent_wins - picked_wins >= heavy_margin)
    return UpsetCheck(is_upset=False, is_heavy=False)


def calculate_pick_points(pick: Pick, game: Game, current_streak: int) -> PointsBreakdown:
    """Points for one pick.

    ``current_streak`` is the user's consecutive-correct count before this
    pick is applied; callers resolving several picks must feed them in
    temporal order.
    """
    winner_id = resolve_winner(game)
    if winner_id is None or pick.picked_team_id != winner_id:
        return NO_POINTS

    formula = _formula_for(game)
    upset = is_upset(game, pick.picked_team_id)
    if upset.is_heavy:
        upset_bonus = formula.heavy_upset_bonus
    elif upset.is_upset:
        upset_bonus = formula.upset_bonus
    else:
        upset_bonus = 0

    streak_bonus = formula.streak_bonus(current_streak)
    return PointsBreakdown(
        base=formula.base,
        upset_bonus=upset_bonus,
        streak_bonus=streak_bonus,
        total=formula.base + upset_bonus + streak_bonus,
    )


compute_pick_points = calculate_pick_points


def is_perfect_night(picks: list[Pick], games: Iterable[Game]) -> bool:
    if len(picks) < PERFECT_NIGHT_MIN_PICKS:
        return False
    final_ids = {g.id for g in games if g.is_final}
    final_picks = [p for p in picks if p.game_id in final_ids]
    return len(final_picks) >= PERFECT_NIGHT_MIN_PICKS and all(
        p.result == PickResult.CORRECT for p in final_picks
    )


def breakdown_to_dict(breakdown: PointsBreakdown) -> dict[str, int]:
    return asdict(breakdown)
