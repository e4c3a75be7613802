from dataclasses import replace
from datetime import UTC, datetime

import pytest

from pickfeed.analytics.aggregate import apply_resolved_pick, resolve_pending_picks
from pickfeed.models.game import GameStatus
from pickfeed.models.pick import PickResult

from factories import game, pick, user


def _start(hour):
    return datetime(2024, 1, 15, hour, 0, tzinfo=UTC)


def test_apply_resolved_pick_tracks_streaks() -> None:
    u = user(current_streak=2, longest_streak=4)
    u = apply_resolved_pick(u, pick(result=PickResult.CORRECT, points_earned=14))
    assert (u.total_picks, u.correct_picks, u.current_streak, u.longest_streak) == (1, 1, 3, 4)
    assert u.total_points == 14 and u.weekly_points == 14

    u = apply_resolved_pick(u, pick(game_id="g2", result=PickResult.INCORRECT))
    assert u.current_streak == 0
    assert u.longest_streak == 4
    assert u.total_picks == 2


def test_apply_resolved_pick_rejects_pending() -> None:
    with pytest.raises(ValueError):
        apply_resolved_pick(user(), pick())


def test_resolve_pending_picks_uses_prior_streak_in_start_order() -> None:
    early = game("early", home_score=100, away_score=90, start_time=_start(17))
    late = game("late", home_score=100, away_score=90, start_time=_start(20))
    pending = game("pending", status=GameStatus.SCHEDULED, start_time=_start(22))
    picks = [pick(game_id="late"), pick(game_id="early"), pick(game_id="pending")]

    u, resolved = resolve_pending_picks(
        user(current_streak=2, longest_streak=2),
        picks,
        {g.id: g for g in (early, late, pending)},
    )

    assert [p.game_id for p in resolved] == ["early", "late"]
    # early sees streak 2 (+4), late sees streak 3 (+6)
    assert [p.points_earned for p in resolved] == [14, 16]
    assert u.current_streak == 4 and u.longest_streak == 4
    assert u.total_points == 30
    assert all(p.result == PickResult.CORRECT for p in resolved)


def test_resolve_pending_picks_skips_resolved_and_other_users() -> None:
    g = game(home_score=1, away_score=0)
    already = replace(pick(), result=PickResult.CORRECT, points_earned=10)
    other = pick(username="bob")

    u, resolved = resolve_pending_picks(user(), [already, other], {g.id: g})
    assert resolved == []
    assert u == user()


def test_tied_final_resolves_incorrect_and_resets_streak(caplog: pytest.LogCaptureFixture) -> None:
    g = game(home_score=2, away_score=2)
    u, resolved = resolve_pending_picks(user(current_streak=3, longest_streak=3), [pick()], {g.id: g})

    assert resolved[0].result == PickResult.INCORRECT
    assert resolved[0].points_earned == 0
    assert u.current_streak == 0
    assert "tied final" in caplog.text
