from __future__ import annotations

from collections import Counter
from datetime import date, datetime

from pickfeed.models.feed import FeedPost, FeedPostType, TrendingPickData
from pickfeed.models.game import Game
from pickfeed.models.pick import Pick


def build_trending_pick(games: list[Game], picks: list[Pick], day: date, now: datetime) -> FeedPost | None:
    """The single most-picked team of the day, with its share of that game's picks."""
    if not picks:
        return None

    pair_counts: Counter[tuple[str, str]] = Counter()
    game_counts: Counter[str] = Counter()
    for pick in picks:
        pair_counts[(pick.game_id, pick.picked_team_id)] += 1
        game_counts[pick.game_id] += 1

    # strict ">" keeps the first pair encountered on ties
    top_pair: tuple[str, str] | None = None
    top_count = 0
    for pair, count in pair_counts.items():
        if count > top_count:
            top_pair, top_count = pair, count
    if top_pair is None:
        return None

    game_id, team_id = top_pair
    game = next((g for g in games if g.id == game_id), None)
    if game is None or game.team(team_id) is None:
        return None

    team, opponent = game.sides(team_id)
    data = TrendingPickData(
        game_id=game.id,
        team_id=team_id,
        team_name=team.display_name,
        team_abbreviation=team.abbreviation,
        team_logo=team.logo,
        opponent_name=opponent.display_name,
        opponent_abbreviation=opponent.abbreviation,
        opponent_logo=opponent.logo,
        pick_count=top_count,
        total_picks_for_game=game_counts[game.id],
        game_date=game.date,
        start_time=game.start_time,
        sport=game.sport,
    )
    return FeedPost(
        id=f"trending-{day.isoformat()}",
        type=FeedPostType.TRENDING_PICK,
        timestamp=now,
        sport=game.sport,
        data=data,
    )
