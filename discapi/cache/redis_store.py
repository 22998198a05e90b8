"""Redis-backed cache store.

Layout per tag:
    cache:{kind}:{page}:{page_size}  page payload, expires with the TTL
    cache:tag:{tag}                  sorted set of payload keys, scored by expiry (ms)
    cache:gen:{tag}                  invalidation counter

Writes run in a transaction WATCHing the generation counter, so a page
computed before an invalidation can never land after it, even when the
invalidation comes from another process.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

from redis.asyncio import Redis
from redis.exceptions import WatchError

from discapi.logging_config import get_logger

from .keys import tag_generation_key, tag_index_key
from .store import Payload

logger = get_logger(name=__name__)

_GENERATION_PREFIX = "cache:gen:"


class RedisCacheStore:
    def __init__(self, redis: Redis, clock: Callable[[], float] = time.time) -> None:
        self._redis = redis
        self._clock = clock

    async def get(self, key: str) -> Optional[Payload]:
        return await self._redis.get(key)

    async def generation(self, tag: str) -> int:
        raw = await self._redis.get(tag_generation_key(tag))
        return int(raw or 0)

    async def put(
        self, key: str, payload: Payload, *, tag: str, ttl: float, generation: int
    ) -> bool:
        generation_key = tag_generation_key(tag)
        index_key = tag_index_key(tag)
        ttl_ms = max(1, int(ttl * 1000))
        now_ms = int(self._clock() * 1000)

        async with self._redis.pipeline(transaction=True) as pipe:
            try:
                await pipe.watch(generation_key)
                current = int(await pipe.get(generation_key) or 0)
                if current != generation:
                    return False
                pipe.multi()
                pipe.set(key, payload, px=ttl_ms)
                pipe.zadd(index_key, {key: now_ms + ttl_ms})
                # Members whose payload Redis already expired
                pipe.zremrangebyscore(index_key, "-inf", now_ms)
                pipe.pexpire(index_key, ttl_ms)
                await pipe.execute()
            except WatchError:
                logger.debug("Generation of '{}' moved while storing {}", tag, key)
                return False
        return True

    async def invalidate_tag(self, tag: str) -> int:
        index_key = tag_index_key(tag)
        # Bump first: any write still in flight for the old generation now fails.
        await self._redis.incr(tag_generation_key(tag))
        keys = await self._redis.zrange(index_key, 0, -1)
        if not keys:
            return 0

        async with self._redis.pipeline(transaction=True) as pipe:
            pipe.delete(*keys)
            pipe.zrem(index_key, *keys)
            deleted, _ = await pipe.execute()
        return deleted

    async def clear(self) -> int:
        """Delete every cached page and tag index; generations are bumped, not dropped."""
        deleted = 0
        cursor = 0
        while True:
            cursor, keys = await self._redis.scan(cursor=cursor, match="cache:*", count=100)
            generation_keys = [k for k in keys if k.startswith(_GENERATION_PREFIX)]
            other_keys = [k for k in keys if not k.startswith(_GENERATION_PREFIX)]
            for generation_key in generation_keys:
                await self._redis.incr(generation_key)
            if other_keys:
                deleted += await self._redis.delete(*other_keys)
            if cursor == 0:
                break
        return deleted
