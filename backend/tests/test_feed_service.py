import asyncio
import logging
from datetime import datetime, timedelta

import pytest

from pickfeed.data_providers.memory import InMemoryPickStore, StaticGameProvider
from pickfeed.feed.personalize import FeedFilter
from pickfeed.models.box_score import BoxScoreAthlete, TeamBoxScore
from pickfeed.models.feed import FeedPostType
from pickfeed.models.game import GameStatus
from pickfeed.models.sport import Sport
from pickfeed.services import feed_service
from pickfeed.services.feed_service import FeedSources, build_feed_page, feed_page_to_dict, feed_window
from pickfeed.services.perf_cache import InMemoryPerformanceCache

from factories import DAY, NOON, game, pick

NOW = NOON + timedelta(hours=8)


class _BoxScores:
    def __init__(self, fail=False):
        self.fail = fail

    async def fetch_box_score(self, sport, game_id):
        if self.fail:
            raise RuntimeError("box score down")
        return [
            TeamBoxScore(
                team_abbreviation=f"{game_id.upper()}-HOME",
                labels=["PTS", "REB", "AST"],
                athletes=[BoxScoreAthlete(f"{game_id}-star", "Star", ["40", "8", "6"])],
            )
        ]


class _News:
    async def fetch_news(self, sport):
        return []


class _BrokenGames:
    async def fetch_games(self, day):
        raise RuntimeError("scoreboard down")


def _sources(games, picks, box_scores=None):
    return FeedSources(
        games=StaticGameProvider(games),
        picks=InMemoryPickStore(picks),
        box_scores=box_scores or _BoxScores(),
        news=_News(),
        cache=InMemoryPerformanceCache(),
    )


def _fixture():
    yesterday = DAY - timedelta(days=1)
    games = [
        game("t1", status=GameStatus.SCHEDULED, home_record="30-10", away_record="29-11"),
        game("y1", day=yesterday, home_score=101, away_score=99),
    ]
    picks = [
        pick("alice", "t1", "t1-home"),
        pick("bob", "t1", "t1-home"),
        pick("carol", "y1", "y1-away", day=yesterday),
    ]
    return games, picks


def test_feed_window_clamps_to_lookback() -> None:
    first = feed_window(0, 5, 50)
    assert (first.start, first.end, first.has_more) == (0, 4, True)
    last = feed_window(45, 5, 50)
    assert (last.end, last.has_more) == (49, False)
    assert feed_window(48, 5, 50).end == 49
    assert feed_window(0, 5, 50).days(DAY)[-1] == DAY - timedelta(days=4)


def test_feed_window_rejects_negative_offset() -> None:
    with pytest.raises(ValueError):
        feed_window(-1, 5, 50)


def test_first_page_has_every_post_kind_sorted_newest_first() -> None:
    games, picks = _fixture()
    page = asyncio.run(build_feed_page(0, _sources(games, picks), today=DAY, now=NOW))

    types = [p.type for p in page.posts]
    assert types.count(FeedPostType.TRENDING_PICK) == 1
    assert types.count(FeedPostType.HOT_PICKS) == 1
    assert FeedPostType.BIG_GAME in types
    assert FeedPostType.GAME_RESULT in types
    assert FeedPostType.PLAYER_PERFORMANCE in types
    assert page.has_more is True
    stamps = [p.timestamp for p in page.posts]
    assert stamps == sorted(stamps, reverse=True)
    assert page.posts[0].type == FeedPostType.TRENDING_PICK


def test_later_pages_skip_today_only_posts() -> None:
    games, picks = _fixture()
    page = asyncio.run(build_feed_page(1, _sources(games, picks), today=DAY, now=NOW))

    types = {p.type for p in page.posts}
    assert FeedPostType.TRENDING_PICK not in types
    assert FeedPostType.HOT_PICKS not in types
    assert FeedPostType.NEWS not in types
    assert FeedPostType.GAME_RESULT in types


def test_last_page_reports_no_more() -> None:
    page = asyncio.run(build_feed_page(45, _sources([], []), today=DAY, now=NOW))
    assert page.posts == []
    assert page.has_more is False


def test_failing_box_score_fetch_drops_only_player_posts(caplog: pytest.LogCaptureFixture) -> None:
    games, picks = _fixture()
    with caplog.at_level(logging.ERROR):
        page = asyncio.run(build_feed_page(0, _sources(games, picks, _BoxScores(fail=True)), today=DAY, now=NOW))

    types = {p.type for p in page.posts}
    assert FeedPostType.PLAYER_PERFORMANCE not in types
    assert FeedPostType.GAME_RESULT in types


def test_raising_builder_does_not_abort_siblings(caplog: pytest.LogCaptureFixture, monkeypatch: pytest.MonkeyPatch) -> None:
    def explode(*args):
        raise KeyError("broken game result")

    monkeypatch.setattr(feed_service, "build_game_results", explode)
    games, picks = _fixture()
    with caplog.at_level(logging.ERROR):
        page = asyncio.run(build_feed_page(0, _sources(games, picks), today=DAY, now=NOW))

    assert "feed builder failed; contributing nothing: builder=game_result" in caplog.text
    types = {p.type for p in page.posts}
    assert FeedPostType.GAME_RESULT not in types
    assert {
        FeedPostType.TRENDING_PICK,
        FeedPostType.HOT_PICKS,
        FeedPostType.BIG_GAME,
        FeedPostType.PLAYER_PERFORMANCE,
    } <= types


def test_failing_game_fetch_yields_empty_days(caplog: pytest.LogCaptureFixture) -> None:
    sources = _sources([], [pick("alice", "t1")])
    sources.games = _BrokenGames()
    with caplog.at_level(logging.ERROR):
        page = asyncio.run(build_feed_page(0, sources, today=DAY, now=NOW))

    assert page.posts == []
    assert "games fetch failed" in caplog.text


def test_feed_page_to_dict_is_plain_data() -> None:
    games, picks = _fixture()
    payload = feed_page_to_dict(asyncio.run(build_feed_page(0, _sources(games, picks), today=DAY, now=NOW)))
    assert payload["has_more"] is True
    assert isinstance(payload["posts"][0]["timestamp"], datetime)
    assert payload["posts"][0]["type"] == FeedPostType.TRENDING_PICK


def test_feed_filter_applies_after_timestamp_sort() -> None:
    games, picks = _fixture()
    sources = _sources(games, picks)

    followed = asyncio.run(
        build_feed_page(0, sources, today=DAY, now=NOW, feed_filter=FeedFilter(followed_teams=frozenset({"y1-away"})))
    )
    assert followed.posts[0].id == "biggame-y1"
    rest = followed.posts[1:]
    assert [p.timestamp for p in rest] == sorted((p.timestamp for p in rest), reverse=True)

    other_league = asyncio.run(
        build_feed_page(0, sources, today=DAY, now=NOW, feed_filter=FeedFilter(followed_leagues=frozenset({Sport.NHL})))
    )
    assert other_league.posts == []
    assert other_league.has_more is True
