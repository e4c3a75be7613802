import asyncio
from datetime import timedelta

import pytest

from pickfeed.data_providers.memory import InMemoryPickStore, StaticGameProvider
from pickfeed.models.game import GameStatus
from pickfeed.services.pick_service import PickRejected, find_game, submit_pick

from factories import DAY, NOON, game


def _games():
    return StaticGameProvider(
        [
            game("g1", status=GameStatus.SCHEDULED),
            game("g2", status=GameStatus.SCHEDULED),
            game("g3", status=GameStatus.SCHEDULED),
            game("g4", status=GameStatus.SCHEDULED),
            game("late", status=GameStatus.SCHEDULED, day=DAY + timedelta(days=1)),
            game("live", status=GameStatus.IN_PROGRESS, home_score=10, away_score=8),
        ]
    )


def _submit(store, game_id, team_id=None, **kwargs):
    return asyncio.run(
        submit_pick(store, _games(), "alice", game_id, team_id or f"{game_id}-home", DAY, now=NOON, **kwargs)
    )


def test_submit_pick_stores_pick() -> None:
    store = InMemoryPickStore()
    stored = _submit(store, "g1", confidence=2)

    assert stored.id == "alice-g1"
    assert stored.confidence == 2
    assert stored.timestamp == NOON
    assert asyncio.run(store.get("alice-g1")) == stored


def test_invalid_confidence_is_dropped() -> None:
    assert _submit(InMemoryPickStore(), "g1", confidence=7).confidence is None


def test_repick_same_game_overwrites() -> None:
    store = InMemoryPickStore()
    _submit(store, "g1")
    _submit(store, "g1", "g1-away")
    picks = asyncio.run(store.all_picks())
    assert [p.picked_team_id for p in picks] == ["g1-away"]


def test_daily_limit() -> None:
    store = InMemoryPickStore()
    for game_id in ("g1", "g2", "g3"):
        _submit(store, game_id)

    with pytest.raises(PickRejected) as exc:
        _submit(store, "g4")
    assert exc.value.status_code == 400
    # changing an existing pick is still allowed
    assert _submit(store, "g2", "g2-away").picked_team_id == "g2-away"


def test_rejections() -> None:
    store = InMemoryPickStore()
    with pytest.raises(PickRejected) as missing:
        _submit(store, "nope")
    assert missing.value.status_code == 404

    with pytest.raises(PickRejected, match="already started"):
        _submit(store, "live")

    with pytest.raises(PickRejected, match="not playing"):
        _submit(store, "g1", "someone-else")


def test_started_by_clock_is_rejected() -> None:
    store = InMemoryPickStore()
    with pytest.raises(PickRejected):
        asyncio.run(submit_pick(store, _games(), "alice", "g1", "g1-home", DAY, now=NOON + timedelta(hours=8)))


def test_find_game_checks_neighbouring_days() -> None:
    found = asyncio.run(find_game(_games(), "late", DAY))
    assert found is not None and found.id == "late"
