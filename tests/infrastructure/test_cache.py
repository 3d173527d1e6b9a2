"""Tests for the copy-on-write item cache."""

from prioctl.domain.items import Item
from prioctl.infrastructure.cache import ItemCache
from tests.conftest import make_item, sample_items


class TestItemCache:
    def test_items_and_get(self) -> None:
        cache: ItemCache[Item] = ItemCache(sample_items())
        assert len(cache) == 5
        assert cache.get("B").order == 2000
        assert cache.get("nope") is None

    def test_snapshot_survives_replace(self) -> None:
        cache: ItemCache[Item] = ItemCache(sample_items())
        snapshot = cache.items()
        cache.replace([make_item("X", "Q1", 1)])
        assert [i.id for i in snapshot] == ["A", "B", "C", "D", "E"]
        assert [i.id for i in cache.items()] == ["X"]

    def test_version_increments(self) -> None:
        cache: ItemCache[Item] = ItemCache()
        cache.replace([])
        cache.replace([make_item("A", "Q1", 1)])
        assert cache.version == 2

    def test_listeners(self) -> None:
        cache: ItemCache[Item] = ItemCache()
        seen: list[int] = []
        unsubscribe = cache.subscribe(lambda items: seen.append(len(items)))
        cache.replace(sample_items())
        unsubscribe()
        cache.replace([])
        assert seen == [5]

    def test_failing_listener_does_not_block_write(self) -> None:
        cache: ItemCache[Item] = ItemCache()
        seen: list[int] = []

        def broken(items: tuple[Item, ...]) -> None:
            raise RuntimeError("render failed")

        cache.subscribe(broken)
        cache.subscribe(lambda items: seen.append(len(items)))
        cache.replace(sample_items())
        assert len(cache) == 5
        assert seen == [5]
