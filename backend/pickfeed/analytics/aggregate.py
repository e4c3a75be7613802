from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import replace

from pickfeed.analytics.outcome import resolve_winner
from pickfeed.analytics.scoring import calculate_pick_points
from pickfeed.models.game import Game
from pickfeed.models.pick import Pick, PickResult
from pickfeed.models.user import Badge, UserAggregate

logger = logging.getLogger(__name__)


def apply_resolved_pick(user: UserAggregate, pick: Pick) -> UserAggregate:
    if pick.result == PickResult.PENDING:
        raise ValueError(f"pick {pick.id} is still pending")

    if pick.result == PickResult.CORRECT:
        streak = user.current_streak + 1
        return replace(
            user,
            total_picks=user.total_picks + 1,
            correct_picks=user.correct_picks + 1,
            current_streak=streak,
            longest_streak=max(user.longest_streak, streak),
            total_points=user.total_points + pick.points_earned,
            weekly_points=user.weekly_points + pick.points_earned,
        )
    return replace(user, total_picks=user.total_picks + 1, current_streak=0)


def _resolution_order(pick: Pick, games_by_id: Mapping[str, Game]) -> tuple:
    return (games_by_id[pick.game_id].start_time, pick.timestamp, pick.id)


def resolve_pending_picks(
    user: UserAggregate,
    picks: list[Pick],
    games_by_id: Mapping[str, Game],
) -> tuple[UserAggregate, list[Pick]]:
    """Resolve the user's pending picks on final games and fold them into the aggregate.

    Picks are scored in game start order so each one sees the streak built
    by the picks before it. Resolved picks are left untouched.
    """
    ready = [
        p
        for p in picks
        if p.username == user.username
        and p.result == PickResult.PENDING
        and p.game_id in games_by_id
        and games_by_id[p.game_id].is_final
        and games_by_id[p.game_id].has_scores
    ]
    ready.sort(key=lambda p: _resolution_order(p, games_by_id))

    resolved: list[Pick] = []
    for pick in ready:
        game = games_by_id[pick.game_id]
        winner_id = resolve_winner(game)
        if winner_id is None:
            logger.warning("tied final resolves as incorrect: pick_id=%s game_id=%s", pick.id, game.id)
        points = calculate_pick_points(pick, game, user.current_streak)
        settled = replace(
            pick,
            result=PickResult.CORRECT if pick.picked_team_id == winner_id else PickResult.INCORRECT,
            points_earned=points.total,
        )
        user = apply_resolved_pick(user, settled)
        resolved.append(settled)

    return user, resolved


def award_badges(user: UserAggregate, badges: list[Badge]) -> UserAggregate:
    """Append badges the user does not already hold. Badges are never removed."""
    held = {b.id for b in user.badges}
    fresh = []
    for badge in badges:
        if badge.id not in held:
            held.add(badge.id)
            fresh.append(badge)
    if not fresh:
        return user
    return replace(user, badges=[*user.badges, *fresh])
