from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class BadgeId(str, Enum):
    FIRST_BLOOD = "first_blood"
    PERFECT_NIGHT = "perfect_night"
    UPSET_KING = "upset_king"
    HOT_STREAK_5 = "hot_streak_5"
    HOT_STREAK_10 = "hot_streak_10"
    IRON_PICKER = "iron_picker"
    SHARPSHOOTER = "sharpshooter"
    CENTURY_CLUB = "century_club"


@dataclass(frozen=True)
class Badge:
    id: BadgeId
    name: str
    description: str
    earned_at: datetime


@dataclass(frozen=True)
class UserAggregate:
    username: str
    total_picks: int = 0
    correct_picks: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    total_points: int = 0
    weekly_points: int = 0
    badges: list[Badge] = field(default_factory=list)

    def has_badge(self, badge_id: BadgeId) -> bool:
        return any(b.id == badge_id for b in self.badges)

    @property
    def accuracy(self) -> float:
        return self.correct_picks / self.total_picks if self.total_picks else 0.0
