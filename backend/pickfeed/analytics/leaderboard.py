from __future__ import annotations

import math
from dataclasses import asdict, dataclass, replace
from datetime import date
from enum import Enum

from pickfeed.models.user import UserAggregate
from pickfeed.utils.records import week_key


class BoardType(str, Enum):
    ALLTIME = "alltime"
    WEEKLY = "weekly"


@dataclass
class LeaderboardEntry:
    rank: int
    username: str
    total_points: int
    weekly_points: int
    current_streak: int
    accuracy: int


@dataclass
class Leaderboard:
    board: BoardType
    entries: list[LeaderboardEntry]
    my_rank: LeaderboardEntry | None = None


def _percent(ratio: float) -> int:
    # halves round up
    return math.floor(ratio * 100 + 0.5)


def _entry(rank: int, user: UserAggregate) -> LeaderboardEntry:
    return LeaderboardEntry(
        rank=rank,
        username=user.username,
        total_points=user.total_points,
        weekly_points=user.weekly_points,
        current_streak=user.current_streak,
        accuracy=_percent(user.accuracy),
    )


def build_leaderboard(
    users: list[UserAggregate],
    board: BoardType | str = BoardType.ALLTIME,
    username: str | None = None,
    limit: int = 100,
) -> Leaderboard:
    board = BoardType(board)
    attr = "weekly_points" if board == BoardType.WEEKLY else "total_points"
    ranked = sorted(users, key=lambda u: getattr(u, attr), reverse=True)

    entries = [_entry(i + 1, u) for i, u in enumerate(ranked[:limit])]

    my_rank = None
    if username and not any(e.username == username for e in entries):
        for i, user in enumerate(ranked):
            if user.username == username:
                my_rank = _entry(i + 1, user)
                break

    return Leaderboard(board=board, entries=entries, my_rank=my_rank)


def reset_weekly_points(
    users: list[UserAggregate], last_reset_key: str | None, today: date
) -> tuple[list[UserAggregate], str]:
    current = week_key(today)
    if last_reset_key == current:
        return users, current
    return [replace(u, weekly_points=0) for u in users], current


def leaderboard_to_dict(leaderboard: Leaderboard) -> dict:
    return asdict(leaderboard)
