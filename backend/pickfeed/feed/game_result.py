from __future__ import annotations

from collections.abc import Mapping
from datetime import date, timedelta

from pickfeed.analytics.outcome import resolve_winner
from pickfeed.models.feed import FeedPost, FeedPostType, GameResultData, GameResultPickEntry
from pickfeed.models.game import Game
from pickfeed.models.pick import Pick

MAX_RESULT_ENTRIES = 5
# results surface a few hours after first pitch / tip-off
RESULT_DELAY = timedelta(hours=3)


def build_game_results(games: list[Game], picks_by_date: Mapping[date, list[Pick]]) -> list[FeedPost]:
    posts: list[FeedPost] = []

    for game in games:
        if not game.is_final or not game.has_scores:
            continue

        game_picks = [p for p in picks_by_date.get(game.date, []) if p.game_id == game.id]
        if not game_picks:
            continue

        winner_id = resolve_winner(game)
        winner = game.team(winner_id) if winner_id else None

        entries = []
        for pick in game_picks[:MAX_RESULT_ENTRIES]:
            team, _ = game.sides(pick.picked_team_id)
            entries.append(
                GameResultPickEntry(
                    username=pick.username,
                    picked_team_id=pick.picked_team_id,
                    picked_team_abbreviation=team.abbreviation,
                    picked_team_logo=team.logo,
                    correct=winner_id is not None and pick.picked_team_id == winner_id,
                )
            )

        data = GameResultData(
            game_id=game.id,
            sport=game.sport,
            home_team=game.home_team,
            away_team=game.away_team,
            home_score=game.home_score,
            away_score=game.away_score,
            game_date=game.date,
            winner_abbreviation=winner.abbreviation if winner else None,
            pickers=entries,
            correct_pickers=[e for e in entries if e.correct],
            correct_count=sum(1 for p in game_picks if winner_id is not None and p.picked_team_id == winner_id),
            total_pickers=len(game_picks),
        )
        posts.append(
            FeedPost(
                id=f"gameresult-{game.id}",
                type=FeedPostType.GAME_RESULT,
                timestamp=game.start_time + RESULT_DELAY,
                sport=game.sport,
                data=data,
            )
        )

    return posts
