from __future__ import annotations

from datetime import date

from pickfeed.models.game import Game
from pickfeed.models.pick import Pick
from pickfeed.models.user import UserAggregate


class InMemoryPickStore:
    """Pick store keyed by pick id; re-picking a game overwrites the earlier pick."""

    def __init__(self, picks: list[Pick] | None = None) -> None:
        self._picks: dict[str, Pick] = {}
        for pick in picks or []:
            self._picks[pick.id] = pick

    async def upsert(self, pick: Pick) -> None:
        self._picks[pick.id] = pick

    async def get(self, pick_id: str) -> Pick | None:
        return self._picks.get(pick_id)

    async def all_picks(self) -> list[Pick]:
        return list(self._picks.values())

    async def picks_by_date(self, day: date) -> list[Pick]:
        return [p for p in self._picks.values() if p.date == day]

    async def picks_by_user(self, username: str) -> list[Pick]:
        return [p for p in self._picks.values() if p.username == username]

    async def picks_by_user_and_date(self, username: str, day: date) -> list[Pick]:
        return [p for p in self._picks.values() if p.username == username and p.date == day]


class StaticGameProvider:
    """Serves a fixed set of games grouped by their calendar day."""

    def __init__(self, games: list[Game] | None = None) -> None:
        self._games: dict[date, list[Game]] = {}
        for game in games or []:
            self._games.setdefault(game.date, []).append(game)

    async def fetch_games(self, day: date) -> list[Game]:
        return list(self._games.get(day, []))


class InMemoryUserStore:
    """User aggregates keyed by username, plus the week key of the last weekly reset."""

    def __init__(self, users: list[UserAggregate] | None = None) -> None:
        self._users: dict[str, UserAggregate] = {u.username: u for u in users or []}
        self.last_weekly_reset: str | None = None

    async def get(self, username: str) -> UserAggregate:
        return self._users.get(username) or UserAggregate(username=username)

    async def save(self, user: UserAggregate) -> None:
        self._users[user.username] = user

    async def all_users(self) -> list[UserAggregate]:
        return list(self._users.values())

    async def replace_all(self, users: list[UserAggregate]) -> None:
        self._users = {u.username: u for u in users}
