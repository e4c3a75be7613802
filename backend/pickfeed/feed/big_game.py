from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from pickfeed.models.feed import BigGameData, FeedPost, FeedPostType
from pickfeed.models.game import Game, GameStatus
from pickfeed.utils.records import Record, parse_record, win_pct

MIN_BIG_GAME_SCORE = 2
MAX_BIG_GAMES = 10
BIG_GAME_LEAD = timedelta(seconds=60)


@dataclass(frozen=True)
class Matchup:
    home: Record
    away: Record
    home_pct: float
    away_pct: float

    @property
    def pct_gap(self) -> float:
        return abs(self.home_pct - self.away_pct)

    @property
    def both_winning(self) -> bool:
        return self.home.is_winning and self.away.is_winning


def _matchup(game: Game) -> Matchup:
    home = parse_record(game.home_team.record)
    away = parse_record(game.away_team.record)
    return Matchup(home=home, away=away, home_pct=win_pct(home), away_pct=win_pct(away))


def _margin(game: Game) -> int | None:
    if not game.has_scores:
        return None
    return abs(game.home_score - game.away_score)


def score_big_game(game: Game) -> int:
    m = _matchup(game)
    if m.pct_gap > 0.25:
        return 0

    score = 0
    if m.pct_gap > 0.15:
        score -= 1
    if m.both_winning:
        score += 2

    margin = _margin(game)
    if margin is not None:
        if margin >= 20:
            return 0
        if margin <= 5:
            score += 3
        elif margin <= 10:
            score += 1
        elif margin >= 15:
            score -= 2

    if m.home.wins + m.away.wins > 60:
        score += 1

    if game.status == GameStatus.SCHEDULED:
        if m.home_pct > 0.6 and m.away_pct > 0.6:
            score += 2
        if m.pct_gap < 0.05 and m.home_pct > 0.5 and m.away_pct > 0.5:
            score += 1

    return score


def big_game_headline(game: Game) -> str:
    m = _matchup(game)
    margin = _margin(game)
    if margin is not None:
        if margin <= 3 and game.status == GameStatus.FINAL:
            return "Nail-Biter Finish"
        if margin <= 5 and game.status == GameStatus.IN_PROGRESS:
            return "Close Game Alert"
        if margin <= 8 and game.status == GameStatus.FINAL:
            return "Down-to-the-Wire"
    if m.home_pct > 0.65 and m.away_pct > 0.65:
        return "Elite Matchup"
    if m.pct_gap < 0.05 and m.home_pct > 0.5:
        return "Dead-Even Clash"
    if m.both_winning:
        return "Playoff-Caliber Clash"
    return "Must-Watch Game"


def build_big_games(games: list[Game]) -> list[FeedPost]:
    scored = [(game, score_big_game(game)) for game in games]
    keep = sorted((pair for pair in scored if pair[1] >= MIN_BIG_GAME_SCORE), key=lambda pair: pair[1], reverse=True)

    posts: list[FeedPost] = []
    for game, score in keep[:MAX_BIG_GAMES]:
        data = BigGameData(
            game_id=game.id,
            home_team=game.home_team,
            away_team=game.away_team,
            start_time=game.start_time,
            game_date=game.date,
            sport=game.sport,
            headline=big_game_headline(game),
            home_score=game.home_score,
            away_score=game.away_score,
            status=game.status,
            score=score,
        )
        posts.append(
            FeedPost(
                id=f"biggame-{game.id}",
                type=FeedPostType.BIG_GAME,
                timestamp=game.start_time - BIG_GAME_LEAD,
                sport=game.sport,
                data=data,
            )
        )
    return posts
