from datetime import UTC, datetime, timedelta

from pickfeed.feed.big_game import build_big_games
from pickfeed.feed.news import merge_articles, news_posts
from pickfeed.feed.personalize import FeedFilter, league_posts, personalize_posts
from pickfeed.feed.player_performance import standout_posts
from pickfeed.feed.trending import build_trending_pick
from pickfeed.models.box_score import BoxScoreAthlete, TeamBoxScore
from pickfeed.models.game import GameStatus
from pickfeed.models.news import NewsArticle
from pickfeed.models.sport import Sport

from factories import DAY, NOON, game, pick


def _big_game(game_id, sport=Sport.NBA, hour=19):
    g = game(
        game_id,
        home_record="30-10",
        away_record="29-11",
        status=GameStatus.SCHEDULED,
        sport=sport,
        start_time=datetime(2024, 1, 15, hour, tzinfo=UTC),
    )
    return build_big_games([g])[0]


def _news(headline, hour, teams=()):
    article = NewsArticle(
        headline=headline,
        published=datetime(2024, 1, 15, hour, tzinfo=UTC),
        sport=Sport.NBA,
        team_abbreviations=list(teams),
    )
    return news_posts(merge_articles([article]))[0]


def _ids(posts):
    return [p.id for p in posts]


def test_nothing_followed_passes_posts_through() -> None:
    posts = [_big_game("g1"), _big_game("g2", sport=Sport.NFL)]
    assert personalize_posts(posts) == posts
    assert personalize_posts(posts) is not posts


def test_followed_leagues_filter_posts() -> None:
    posts = [_big_game("g1"), _big_game("g2", sport=Sport.NFL), _news("trade", 10)]
    assert _ids(personalize_posts(posts, followed_leagues=[Sport.NBA])) == ["biggame-g1", _ids(posts)[2]]


def test_followed_team_posts_move_to_front_stably() -> None:
    trending = build_trending_pick(
        [game("g4", status=GameStatus.SCHEDULED)], [pick("a", "g4", "g4-away")], DAY, NOON + timedelta(hours=9)
    )
    posts = [trending, _big_game("g1", hour=20), _news("trade", 12), _big_game("g3", hour=18)]

    ordered = personalize_posts(posts, followed_teams=["g3-away", "g4-away"])

    assert _ids(ordered) == ["trending-2024-01-15", "biggame-g3", "biggame-g1", posts[2].id]


def test_league_view_filters_by_team() -> None:
    g1 = game("g1", home_score=110, away_score=100)
    box = [
        TeamBoxScore("G1-HOME", ["PTS"], [BoxScoreAthlete("p1", "Home Star", ["35"])]),
        TeamBoxScore("G1-AWAY", ["PTS"], [BoxScoreAthlete("p2", "Away Star", ["33"])]),
    ]
    home_perf, away_perf = standout_posts(g1, box)
    tagged = _news("home news", 9, teams=["G1-HOME"])
    other = _news("other news", 8, teams=["NYK"])
    general = _news("league news", 7)
    nfl = _big_game("g9", sport=Sport.NFL)
    posts = [_big_game("g1"), _big_game("g2"), home_perf, away_perf, tagged, other, general, nfl]

    kept = league_posts(posts, Sport.NBA, team_id="g1-home", team_abbreviation="G1-HOME")

    assert _ids(kept) == ["biggame-g1", home_perf.id, tagged.id, general.id]
    assert len(league_posts(posts, Sport.NBA)) == 7


def test_league_view_ignores_follows() -> None:
    posts = [_big_game("g1"), _big_game("g2", sport=Sport.NFL)]
    view = FeedFilter(followed_leagues=frozenset({Sport.NBA}), league=Sport.NFL)
    assert _ids(view.apply(posts)) == ["biggame-g2"]
    assert _ids(FeedFilter(followed_leagues=frozenset({Sport.NBA})).apply(posts)) == ["biggame-g1"]
