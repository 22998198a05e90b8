"""Caching utilities: paginated collection cache, stores, and key helpers."""

from .collection import PaginatedCollectionCache
from .invalidation import commit_and_invalidate
from .keys import CacheKey, ResourceKind, build_cache_key
from .redis_store import RedisCacheStore
from .serialization import deserialize_page, serialize_page
from .store import CacheEntry, CacheStore, MemoryCacheStore

__all__ = [
    "PaginatedCollectionCache",
    "commit_and_invalidate",
    "CacheKey",
    "ResourceKind",
    "build_cache_key",
    "CacheStore",
    "CacheEntry",
    "MemoryCacheStore",
    "RedisCacheStore",
    "serialize_page",
    "deserialize_page",
]
