from datetime import UTC, date, datetime

from pickfeed.analytics.aggregate import award_badges
from pickfeed.analytics.badges import badge_definitions, evaluate_new_badges, longest_daily_run, make_badge
from pickfeed.models.pick import PickResult
from pickfeed.models.user import BadgeId

from factories import days_from, game, pick, user

NOW = datetime(2024, 1, 15, 23, 0, tzinfo=UTC)


def _ids(badges):
    return {b.id for b in badges}


def test_badge_definitions_cover_closed_set() -> None:
    assert {d.id for d in badge_definitions()} == set(BadgeId)


def test_first_blood_and_earned_at() -> None:
    badges = evaluate_new_badges(user(total_picks=1, correct_picks=1), [], [], [], now=NOW)
    assert _ids(badges) == {BadgeId.FIRST_BLOOD}
    assert badges[0].earned_at == NOW
    assert badges[0].name == "First Blood"


def test_held_badges_are_not_re_emitted() -> None:
    holder = user(total_picks=1, correct_picks=1, badges=[make_badge(BadgeId.FIRST_BLOOD, NOW)])
    assert evaluate_new_badges(holder, [], [], [], now=NOW) == []


def test_streak_badges() -> None:
    badges = evaluate_new_badges(user(total_picks=10, correct_picks=10, current_streak=10, longest_streak=10), [], [], [])
    assert {BadgeId.HOT_STREAK_5, BadgeId.HOT_STREAK_10} <= _ids(badges)

    badges = evaluate_new_badges(user(total_picks=5, correct_picks=5, current_streak=5, longest_streak=5), [], [], [])
    assert BadgeId.HOT_STREAK_5 in _ids(badges)
    assert BadgeId.HOT_STREAK_10 not in _ids(badges)


def test_perfect_night_badge() -> None:
    games = [game(gid, home_score=2, away_score=1) for gid in ("a", "b", "c")]
    picks = [pick(game_id=gid, result=PickResult.CORRECT, points_earned=10) for gid in ("a", "b", "c")]
    badges = evaluate_new_badges(user(total_picks=3, correct_picks=3), picks, games, picks)
    assert BadgeId.PERFECT_NIGHT in _ids(badges)


def test_upset_king_counts_correct_picks_above_base_points() -> None:
    history = [pick(game_id=f"g{i}", result=PickResult.CORRECT, points_earned=15) for i in range(4)]
    history.append(pick(game_id="g9", result=PickResult.INCORRECT, points_earned=20))
    history.append(pick(game_id="g10", result=PickResult.CORRECT, points_earned=10))
    assert BadgeId.UPSET_KING not in _ids(evaluate_new_badges(user(), [], [], history))

    history.append(pick(game_id="g11", result=PickResult.CORRECT, points_earned=20))
    assert BadgeId.UPSET_KING in _ids(evaluate_new_badges(user(), [], [], history))


def test_iron_picker_seven_consecutive_days() -> None:
    history = [pick(game_id=f"g{i}", day=d) for i, d in enumerate(days_from(date(2024, 1, 1), 7))]
    assert BadgeId.IRON_PICKER in _ids(evaluate_new_badges(user(), [], [], history))


def test_iron_picker_broken_by_gap() -> None:
    dates = [d for d in days_from(date(2024, 1, 1), 8) if d != date(2024, 1, 4)]
    history = [pick(game_id=f"g{i}", day=d) for i, d in enumerate(dates)]
    assert len(history) == 7
    assert BadgeId.IRON_PICKER not in _ids(evaluate_new_badges(user(), [], [], history))


def test_iron_picker_dedupes_same_day_picks() -> None:
    dates = days_from(date(2024, 1, 1), 6)
    history = [pick(game_id=f"g{i}", day=d) for i, d in enumerate(dates)]
    history += [pick(game_id=f"x{i}", day=d) for i, d in enumerate(dates)]
    assert longest_daily_run([p.date for p in history]) == 6
    assert BadgeId.IRON_PICKER not in _ids(evaluate_new_badges(user(), [], [], history))


def test_longest_daily_run_handles_unsorted_and_empty_input() -> None:
    assert longest_daily_run([]) == 0
    assert longest_daily_run([date(2024, 1, 3), date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 9)]) == 3


def test_sharpshooter_requires_volume_and_accuracy() -> None:
    assert BadgeId.SHARPSHOOTER in _ids(evaluate_new_badges(user(total_picks=50, correct_picks=35), [], [], []))
    assert BadgeId.SHARPSHOOTER not in _ids(evaluate_new_badges(user(total_picks=50, correct_picks=34), [], [], []))
    assert BadgeId.SHARPSHOOTER not in _ids(evaluate_new_badges(user(total_picks=49, correct_picks=49), [], [], []))


def test_century_club() -> None:
    badges = evaluate_new_badges(user(total_picks=150, correct_picks=100), [], [], [])
    assert BadgeId.CENTURY_CLUB in _ids(badges)


def test_evaluation_is_idempotent_once_badges_are_awarded() -> None:
    veteran = user(total_picks=120, correct_picks=100, current_streak=10, longest_streak=10)
    first = evaluate_new_badges(veteran, [], [], [], now=NOW)
    updated = award_badges(veteran, first)

    assert evaluate_new_badges(updated, [], [], [], now=NOW) == []
    assert award_badges(updated, first) is updated
    assert len(updated.badges) == len(_ids(updated.badges))
