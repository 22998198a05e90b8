"""Paginated collection cache.

Usage:
    cache = PaginatedCollectionCache(MemoryCacheStore(), ttl=60)

    async def compute() -> str:
        rows = await fetch_page(session, Singer, key.page, key.page_size)
        return serialize_page(rows)

    payload = await cache.get_page(ResourceKind.SINGER, page, limit, compute)

    # after every successful commit touching singers
    await cache.invalidate(ResourceKind.SINGER)
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, Optional

from discapi.logging_config import get_logger

from .keys import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, CacheKey, ResourceKind, build_cache_key
from .store import CacheStore, Payload

logger = get_logger(name=__name__)

DEFAULT_TTL_SECONDS = 60

Compute = Callable[[], Awaitable[Payload]]


class PaginatedCollectionCache:
    """Serves list pages with bounded staleness and tag invalidation.

    Concurrent misses on the same key share a single computation: the
    first caller holds the key's lock while computing, the others wait
    on it and then read the stored page. Unrelated keys never share a
    lock.
    """

    def __init__(
        self,
        store: CacheStore,
        ttl: float = DEFAULT_TTL_SECONDS,
        default_page: int = DEFAULT_PAGE,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        max_page_size: Optional[int] = None,
    ) -> None:
        self.store = store
        self.ttl = ttl
        self.default_page = default_page
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size
        self._fetch_locks: Dict[str, asyncio.Lock] = {}
        self._fetch_lock_users: Dict[str, int] = {}

    def key_for(self, resource_kind: ResourceKind, page: Any, page_size: Any) -> CacheKey:
        return build_cache_key(
            resource_kind,
            page,
            page_size,
            default_page=self.default_page,
            default_page_size=self.default_page_size,
            max_page_size=self.max_page_size,
        )

    async def get_page(
        self,
        resource_kind: ResourceKind,
        page: Any,
        page_size: Any,
        compute: Compute,
    ) -> Payload:
        """Return the cached page, computing and storing it on a miss.

        Args:
            resource_kind: Which collection the page belongs to.
            page: Requested page; absent, non-numeric or non-positive means 1.
            page_size: Requested page size; same fallback, to 3, and clamped
                to ``max_page_size`` when one is set.
            compute: Coroutine function producing the serialized page.
                Called at most once per miss; whatever it raises
                propagates and nothing is stored.
        """
        key = self.key_for(resource_kind, page, page_size)
        cache_key = str(key)

        payload = await self.store.get(cache_key)
        if payload is not None:
            logger.debug("Cache HIT: {}", cache_key)
            return payload

        async with self._fetch_lock(cache_key):
            # Another caller may have stored the page while we were waiting.
            payload = await self.store.get(cache_key)
            if payload is not None:
                logger.debug("Cache HIT after wait: {}", cache_key)
                return payload

            generation = await self.store.generation(key.tag)
            logger.debug("Cache MISS: {}", cache_key)
            payload = await compute()

            stored = await self.store.put(
                cache_key,
                payload,
                tag=key.tag,
                ttl=self.ttl,
                generation=generation,
            )
            if not stored:
                logger.debug(
                    "Discarded {}: '{}' was invalidated during compute", cache_key, key.tag
                )
            return payload

    async def invalidate(self, resource_kind: ResourceKind) -> int:
        """Drop every cached page of ``resource_kind``.

        Returns:
            Number of pages deleted.
        """
        tag = ResourceKind(resource_kind).tag
        deleted = await self.store.invalidate_tag(tag)
        if deleted > 0:
            logger.info("Invalidated {} cached pages tagged '{}'", deleted, tag)
        else:
            logger.debug("No cached pages tagged '{}' to invalidate", tag)
        return deleted

    async def clear(self) -> int:
        """Drop every cached page of every resource kind."""
        deleted = await self.store.clear()
        logger.info("Cleared {} cache keys", deleted)
        return deleted

    @asynccontextmanager
    async def _fetch_lock(self, cache_key: str) -> AsyncIterator[None]:
        """Hold the per-key lock; forget it once nobody uses it."""
        lock = self._fetch_locks.get(cache_key)
        if lock is None:
            lock = asyncio.Lock()
            self._fetch_locks[cache_key] = lock
        self._fetch_lock_users[cache_key] = self._fetch_lock_users.get(cache_key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._fetch_lock_users[cache_key] -= 1
            if not self._fetch_lock_users[cache_key]:
                del self._fetch_lock_users[cache_key]
                del self._fetch_locks[cache_key]
