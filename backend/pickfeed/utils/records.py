from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, timedelta

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class Record:
    wins: int
    losses: int

    @property
    def games(self) -> int:
        return self.wins + self.losses

    @property
    def is_winning(self) -> bool:
        return self.wins > self.losses


def _leading_int(segment: str) -> int:
    match = _LEADING_INT.match(segment)
    return int(match.group(1)) if match else 0


def parse_record(record: str | None) -> Record:
    """Parse "W-L" into a Record. Unparseable segments degrade to 0. "10-5" -> Record(10, 5)"""
    parts = (record or "").split("-")
    wins = _leading_int(parts[0])
    losses = _leading_int(parts[1]) if len(parts) > 1 else 0
    return Record(wins=wins, losses=losses)


def win_pct(record: Record) -> float:
    """Winning percentage; a team with no games counts as 0-of-1."""
    return record.wins / (record.games or 1)


def add_days(day: date, days: int) -> date:
    return day + timedelta(days=days)


def week_key(day: date) -> str:
    """Calendar week bucket counted in 7-day blocks from Jan 1. date(2024, 1, 8) -> "2024-W2" """
    week = (day - date(day.year, 1, 1)).days // 7 + 1
    return f"{day.year}-W{week}"
