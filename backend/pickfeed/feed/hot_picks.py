from __future__ import annotations

from datetime import date, datetime, timedelta

from pickfeed.models.feed import FeedPost, FeedPostType, HotPickEntry, HotPicksData
from pickfeed.models.game import Game
from pickfeed.models.pick import Pick

MAX_HOT_PICKS = 5
# sits just under the trending post
HOT_PICKS_LAG = timedelta(seconds=30)


def _headline(entries: list[HotPickEntry]) -> str:
    if len(entries) == 1:
        return f"{entries[0].username} is locked in today"
    return f"{len(entries)} picks are in: see who's riding who"


def build_hot_picks(games: list[Game], picks: list[Pick], day: date, now: datetime) -> FeedPost | None:
    games_by_id = {g.id: g for g in games}
    seen_users: set[str] = set()
    entries: list[HotPickEntry] = []

    for pick in picks:
        if pick.username in seen_users:
            continue
        game = games_by_id.get(pick.game_id)
        if game is None:
            continue

        team, opponent = game.sides(pick.picked_team_id)
        entries.append(
            HotPickEntry(
                username=pick.username,
                picked_team_id=pick.picked_team_id,
                picked_team_name=team.display_name,
                picked_team_abbreviation=team.abbreviation,
                picked_team_logo=team.logo,
                opponent_abbreviation=opponent.abbreviation,
                opponent_logo=opponent.logo,
                sport=game.sport,
                game_id=game.id,
            )
        )
        seen_users.add(pick.username)
        if len(entries) >= MAX_HOT_PICKS:
            break

    if not entries:
        return None

    return FeedPost(
        id=f"hotpicks-{day.isoformat()}",
        type=FeedPostType.HOT_PICKS,
        timestamp=now - HOT_PICKS_LAG,
        sport=entries[0].sport,
        data=HotPicksData(date=day, picks=entries, headline=_headline(entries)),
    )
