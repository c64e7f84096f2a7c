"""Generation-tagged caching of derived artifacts."""

from style_engine.cache.keys import fingerprint
from style_engine.cache.manager import CacheManager, CacheStats
from style_engine.cache.tiers import (
    CacheEntry,
    InMemoryCacheTier,
    MemoryTier,
    PersistentCacheTier,
    SQLiteCacheTier,
)

__all__ = [
    "CacheEntry",
    "CacheManager",
    "CacheStats",
    "InMemoryCacheTier",
    "MemoryTier",
    "PersistentCacheTier",
    "SQLiteCacheTier",
    "fingerprint",
]
