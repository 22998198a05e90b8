"""Cache stores backing the collection cache.

A store keeps ``key -> entry`` plus a ``tag -> keys`` index so a whole
resource kind can be evicted without scanning every key. Each tag also
carries a generation counter; a value computed under an older generation
is refused at store time.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol, Set, Union, runtime_checkable

Payload = Union[str, bytes]


@runtime_checkable
class CacheStore(Protocol):
    async def get(self, key: str) -> Optional[Payload]: ...
    async def generation(self, tag: str) -> int: ...
    async def put(
        self, key: str, payload: Payload, *, tag: str, ttl: float, generation: int
    ) -> bool: ...
    async def invalidate_tag(self, tag: str) -> int: ...
    async def clear(self) -> int: ...


@dataclass(frozen=True)
class CacheEntry:
    key: str
    payload: Payload
    tag: str
    created_at: float
    ttl: float

    def is_fresh(self, now: float) -> bool:
        return now < self.created_at + self.ttl


class MemoryCacheStore:
    """In-process store for a single worker.

    No method awaits between reading and writing its dicts, so every
    operation is atomic on the event loop. Entries are kept in write order
    and each write evicts expired ones from the oldest end, which assumes
    a single TTL across the store (as used by the collection cache).
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._tags: Dict[str, Set[str]] = {}
        self._generations: Dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, key: str) -> Optional[Payload]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not entry.is_fresh(self._clock()):
            self._discard(key)
            return None
        return entry.payload

    async def generation(self, tag: str) -> int:
        return self._generations.setdefault(tag, 0)

    async def put(
        self, key: str, payload: Payload, *, tag: str, ttl: float, generation: int
    ) -> bool:
        if self._generations.get(tag, 0) != generation:
            return False
        now = self._clock()
        self._evict_expired(now)
        # Re-inserted at the end so _entries stays ordered by write time
        self._discard(key)
        self._entries[key] = CacheEntry(
            key=key,
            payload=payload,
            tag=tag,
            created_at=now,
            ttl=ttl,
        )
        self._tags.setdefault(tag, set()).add(key)
        return True

    async def invalidate_tag(self, tag: str) -> int:
        self._generations[tag] = self._generations.get(tag, 0) + 1
        keys = self._tags.pop(tag, set())
        for key in keys:
            self._entries.pop(key, None)
        return len(keys)

    async def clear(self) -> int:
        deleted = len(self._entries)
        for tag in self._generations:
            self._generations[tag] += 1
        self._entries.clear()
        self._tags.clear()
        return deleted

    def _evict_expired(self, now: float) -> None:
        """Drop expired entries from the oldest end, stopping at the first fresh one."""
        while self._entries:
            oldest = next(iter(self._entries.values()))
            if oldest.is_fresh(now):
                break
            self._discard(oldest.key)

    def _discard(self, key: str) -> None:
        entry = self._entries.pop(key, None)
        if entry is not None:
            keys = self._tags.get(entry.tag)
            if keys is not None:
                keys.discard(key)
                if not keys:
                    del self._tags[entry.tag]
