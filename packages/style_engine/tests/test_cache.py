from __future__ import annotations

import pytest
from style_engine.cache import (
    CacheManager,
    InMemoryCacheTier,
    MemoryTier,
    SQLiteCacheTier,
    fingerprint,
)
from style_engine.cache.tiers import CacheEntry
from style_engine.extensions import ExtensionRegistry


@pytest.fixture
def generation() -> list[int]:
    return [1]


@pytest.fixture
def manager(generation) -> CacheManager:
    return CacheManager(
        ExtensionRegistry(),
        lambda: generation[0],
        persistent=InMemoryCacheTier(),
    )


def test_fingerprint_is_order_independent() -> None:
    assert fingerprint({"a": 1, "b": 2}) == fingerprint({"b": 2, "a": 1})
    assert fingerprint({"a": 1}) != fingerprint({"a": 2})


def test_hit_and_generation_miss(manager, generation) -> None:
    manager.put("k", b"value")
    assert manager.get("k") == b"value"

    generation[0] = 2
    assert manager.get("k") is None

    stats = manager.get_stats()
    assert stats.hit_count == 1
    assert stats.miss_count == 1
    assert stats.item_count == 0
    assert stats.persistent_item_count == 0
    assert stats.hit_rate == 0.5


def test_persistent_hit_backfills_memory(generation) -> None:
    persistent = InMemoryCacheTier()
    persistent.put(CacheEntry("k", b"css", 3, "2024-01-01T00:00:00+00:00", 1))
    manager = CacheManager(ExtensionRegistry(), lambda: generation[0], persistent=persistent)

    assert manager.get_stats().item_count == 0
    assert manager.get("k") == b"css"
    assert manager.get_stats().item_count == 1


def test_invalidate_all_clears_memory_and_notifies(generation) -> None:
    registry = ExtensionRegistry()
    seen: list[int] = []
    registry.add_action("cache.invalidated", seen.append)
    manager = CacheManager(registry, lambda: generation[0], persistent=InMemoryCacheTier())
    manager.put("k", b"value")

    manager.invalidate_all()

    assert manager.get_stats().item_count == 0
    assert manager.get_stats().persistent_item_count == 1
    assert manager.get_stats().invalidations == 1
    assert seen == [1]


def test_remember_computes_once(manager) -> None:
    calls: list[int] = []

    def produce() -> bytes:
        calls.append(1)
        return b"expensive"

    assert manager.remember("k", produce) == b"expensive"
    assert manager.remember("k", produce) == b"expensive"
    assert len(calls) == 1


def test_delete_removes_both_tiers(manager) -> None:
    manager.put("k", b"value")
    manager.delete("k")
    assert manager.get("k") is None


def test_memory_tier_evicts_least_recently_used() -> None:
    tier = MemoryTier(max_items=2, max_bytes=100)
    for key in ("a", "b"):
        tier.put(CacheEntry(key, b"x", 1, "", 0))
    tier.get("a")
    tier.put(CacheEntry("c", b"x", 1, "", 0))

    assert tier.get("b") is None
    assert tier.get("a") is not None
    assert tier.item_count == 2


def test_memory_tier_respects_byte_limit() -> None:
    tier = MemoryTier(max_items=10, max_bytes=10)
    tier.put(CacheEntry("a", b"123456", 6, "", 0))
    tier.put(CacheEntry("b", b"123456", 6, "", 0))
    tier.put(CacheEntry("huge", b"x" * 20, 20, "", 0))

    assert tier.get("a") is None
    assert tier.get("huge") is None
    assert tier.total_bytes == 6


def test_memory_tier_limits_must_be_positive() -> None:
    with pytest.raises(ValueError):
        MemoryTier(max_items=0)


def test_sqlite_tier_roundtrip(tmp_path) -> None:
    tier = SQLiteCacheTier(tmp_path / "cache.db")
    tier.put(CacheEntry("k", b"\x00css", 4, "2024-01-01T00:00:00+00:00", 3))

    entry = tier.get("k")
    assert entry is not None
    assert entry.value == b"\x00css"
    assert entry.generation == 3
    assert tier.stats() == (1, 4)

    tier.delete("k")
    assert tier.get("k") is None
    assert tier.stats() == (0, 0)
