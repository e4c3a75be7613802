from datetime import timedelta

from pickfeed.feed.hot_picks import build_hot_picks
from pickfeed.feed.trending import build_trending_pick
from pickfeed.models.feed import FeedPostType
from pickfeed.models.game import GameStatus

from factories import DAY, NOON, game, pick


def _games():
    return [game("g1", status=GameStatus.SCHEDULED), game("g2", status=GameStatus.SCHEDULED)]


def test_trending_pick_selects_most_picked_team() -> None:
    picks = [
        pick("a", "g1", "g1-home"),
        pick("b", "g2", "g2-away"),
        pick("c", "g2", "g2-away"),
        pick("d", "g2", "g2-home"),
    ]
    post = build_trending_pick(_games(), picks, DAY, NOON)

    assert post.id == "trending-2024-01-15"
    assert post.type == FeedPostType.TRENDING_PICK
    assert post.timestamp == NOON
    assert post.data.team_id == "g2-away"
    assert post.data.opponent_abbreviation == "G2-HOME"
    assert post.data.pick_count == 2
    assert post.data.total_picks_for_game == 3


def test_trending_pick_tie_keeps_first_encountered() -> None:
    picks = [pick("a", "g2", "g2-home"), pick("b", "g1", "g1-away")]
    post = build_trending_pick(_games(), picks, DAY, NOON)
    assert post.data.team_id == "g2-home"


def test_trending_pick_empty_or_unknown_game() -> None:
    assert build_trending_pick(_games(), [], DAY, NOON) is None
    assert build_trending_pick(_games(), [pick("a", "zzz", "zzz-home")], DAY, NOON) is None


def test_hot_picks_one_per_user_capped_at_five() -> None:
    picks = [pick("alice", "g1"), pick("alice", "g2")]
    picks += [pick(f"user{i}", "g2", "g2-away") for i in range(6)]
    post = build_hot_picks(_games(), picks, DAY, NOON)

    assert post.id == "hotpicks-2024-01-15"
    assert post.timestamp == NOON - timedelta(seconds=30)
    assert [e.username for e in post.data.picks] == ["alice", "user0", "user1", "user2", "user3"]
    assert post.data.picks[0].game_id == "g1"
    assert post.data.picks[1].picked_team_abbreviation == "G2-AWAY"
    assert post.data.picks[1].opponent_abbreviation == "G2-HOME"
    assert post.data.headline.startswith("5 picks are in")


def test_hot_picks_skips_unknown_games_and_uses_single_headline() -> None:
    picks = [pick("ghost", "nope"), pick("bob", "g1")]
    post = build_hot_picks(_games(), picks, DAY, NOON)
    assert [e.username for e in post.data.picks] == ["bob"]
    assert post.data.headline == "bob is locked in today"


def test_hot_picks_no_entries() -> None:
    assert build_hot_picks(_games(), [], DAY, NOON) is None
    assert build_hot_picks(_games(), [pick("ghost", "nope")], DAY, NOON) is None
