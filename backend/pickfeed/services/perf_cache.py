from __future__ import annotations

from typing import Protocol

from pickfeed.models.feed import FeedPost


class PerformanceCache(Protocol):
    def get(self, key: str) -> list[FeedPost] | None: ...

    def set(self, key: str, posts: list[FeedPost]) -> None: ...


class InMemoryPerformanceCache:
    """Process-lifetime memo of player-performance posts keyed by game."""

    def __init__(self) -> None:
        self._entries: dict[str, list[FeedPost]] = {}

    def get(self, key: str) -> list[FeedPost] | None:
        posts = self._entries.get(key)
        return list(posts) if posts is not None else None

    def set(self, key: str, posts: list[FeedPost]) -> None:
        self._entries[key] = list(posts)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class NullPerformanceCache:
    def get(self, key: str) -> list[FeedPost] | None:
        return None

    def set(self, key: str, posts: list[FeedPost]) -> None:
        return None


perf_cache = InMemoryPerformanceCache()
