from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, date, datetime

from pickfeed.analytics.scoring import is_perfect_night
from pickfeed.models.game import Game
from pickfeed.models.pick import Pick, PickResult
from pickfeed.models.user import Badge, BadgeId, UserAggregate

UPSET_POINTS_FLOOR = 10
UPSET_KING_MIN = 5
IRON_PICKER_DAYS = 7
SHARPSHOOTER_MIN_PICKS = 50
SHARPSHOOTER_MIN_ACCURACY = 0.70
CENTURY_CLUB_MIN = 100


@dataclass(frozen=True)
class BadgeDefinition:
    id: BadgeId
    name: str
    description: str


BADGE_DEFINITIONS: dict[BadgeId, BadgeDefinition] = {
    d.id: d
    for d in (
        BadgeDefinition(BadgeId.FIRST_BLOOD, "First Blood", "Got your first correct pick"),
        BadgeDefinition(BadgeId.PERFECT_NIGHT, "Perfect Night", "Got every pick right in a single day (min 3)"),
        BadgeDefinition(BadgeId.UPSET_KING, "Upset King", "Correctly picked 5+ upsets"),
        BadgeDefinition(BadgeId.HOT_STREAK_5, "Hot Streak", "Got 5 correct picks in a row"),
        BadgeDefinition(BadgeId.HOT_STREAK_10, "On Fire", "Got 10 correct picks in a row"),
        BadgeDefinition(BadgeId.IRON_PICKER, "Iron Picker", "Picked at least 1 game every day for 7 straight days"),
        BadgeDefinition(BadgeId.SHARPSHOOTER, "Sharpshooter", "70%+ accuracy over 50+ picks"),
        BadgeDefinition(BadgeId.CENTURY_CLUB, "Century Club", "100+ correct picks"),
    )
}


def badge_definitions() -> list[BadgeDefinition]:
    return list(BADGE_DEFINITIONS.values())


def make_badge(badge_id: BadgeId, earned_at: datetime | None = None) -> Badge:
    definition = BADGE_DEFINITIONS[badge_id]
    return Badge(
        id=definition.id,
        name=definition.name,
        description=definition.description,
        earned_at=earned_at or datetime.now(UTC),
    )


def count_upset_wins(all_picks: list[Pick]) -> int:
    # anything above the base 10 carried an upset or streak bonus
    return sum(1 for p in all_picks if p.result == PickResult.CORRECT and p.points_earned > UPSET_POINTS_FLOOR)


def longest_daily_run(pick_dates: list[date]) -> int:
    """Longest run of consecutive calendar days among the given dates (duplicates collapse)."""
    days = sorted(set(pick_dates))
    if not days:
        return 0
    longest = run = 1
    for prev, curr in zip(days, days[1:]):
        if (curr - prev).days == 1:
            run += 1
            longest = max(longest, run)
        else:
            run = 1
    return longest


def evaluate_new_badges(
    user: UserAggregate,
    today_picks: list[Pick],
    today_games: list[Game],
    all_picks: list[Pick],
    now: datetime | None = None,
) -> list[Badge]:
    """Badges the user newly qualifies for. Held badges are never re-emitted."""
    earned_at = now or datetime.now(UTC)
    qualifying: list[BadgeId] = []

    def check(badge_id: BadgeId, rule) -> None:
        if not user.has_badge(badge_id) and rule():
            qualifying.append(badge_id)

    check(BadgeId.FIRST_BLOOD, lambda: user.correct_picks >= 1)
    check(BadgeId.PERFECT_NIGHT, lambda: is_perfect_night(today_picks, today_games))
    check(BadgeId.UPSET_KING, lambda: count_upset_wins(all_picks) >= UPSET_KING_MIN)
    check(BadgeId.HOT_STREAK_5, lambda: user.current_streak >= 5)
    check(BadgeId.HOT_STREAK_10, lambda: user.current_streak >= 10)
    check(BadgeId.IRON_PICKER, lambda: longest_daily_run([p.date for p in all_picks]) >= IRON_PICKER_DAYS)
    check(
        BadgeId.SHARPSHOOTER,
        lambda: user.total_picks >= SHARPSHOOTER_MIN_PICKS and user.accuracy >= SHARPSHOOTER_MIN_ACCURACY,
    )
    check(BadgeId.CENTURY_CLUB, lambda: user.correct_picks >= CENTURY_CLUB_MIN)

    return [make_badge(badge_id, earned_at) for badge_id in qualifying]
