"""
Unit tests for PaginatedCollectionCache.
"""

import asyncio

import pytest

from conftest import CountingCompute
from discapi.cache import ResourceKind


class TestGetPage:
    """Hits, misses and pagination fallbacks."""

    @pytest.mark.asyncio
    async def test_second_call_is_served_from_cache(self, cache):
        compute = CountingCompute('[{"id": 1}]')

        first = await cache.get_page(ResourceKind.SINGER, 1, 3, compute)
        second = await cache.get_page(ResourceKind.SINGER, 1, 3, compute)

        assert first == second == '[{"id": 1}]'
        assert compute.calls == 1

    @pytest.mark.asyncio
    async def test_cached_page_skips_other_compute(self, cache):
        compute_a = CountingCompute("P1")
        compute_b = CountingCompute("P2")

        assert await cache.get_page(ResourceKind.SINGER, 1, 3, compute_a) == "P1"
        assert await cache.get_page(ResourceKind.SINGER, 1, 3, compute_b) == "P1"
        assert compute_b.calls == 0

        await cache.invalidate(ResourceKind.SINGER)

        assert await cache.get_page(ResourceKind.SINGER, 1, 3, compute_b) == "P2"
        assert compute_a.calls == 1
        assert compute_b.calls == 1

    @pytest.mark.asyncio
    async def test_pages_and_sizes_are_separate_entries(self, cache):
        page_one = CountingCompute("page-1")
        page_two = CountingCompute("page-2")
        bigger = CountingCompute("size-10")

        assert await cache.get_page(ResourceKind.RECORD, 1, 3, page_one) == "page-1"
        assert await cache.get_page(ResourceKind.RECORD, 2, 3, page_two) == "page-2"
        assert await cache.get_page(ResourceKind.RECORD, 1, 10, bigger) == "size-10"
        assert len(cache.store) == 3

    @pytest.mark.asyncio
    @pytest.mark.parametrize("page", [0, -5, "abc", None, "1"])
    async def test_invalid_page_behaves_like_page_one(self, cache, page):
        first = CountingCompute("page-one")
        other = CountingCompute("other")

        await cache.get_page(ResourceKind.SONG, 1, 3, first)
        payload = await cache.get_page(ResourceKind.SONG, page, 3, other)

        assert payload == "page-one"
        assert other.calls == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("page_size", [0, -5, "many", None, "3"])
    async def test_invalid_page_size_behaves_like_three(self, cache, page_size):
        first = CountingCompute("three-per-page")
        other = CountingCompute("other")

        await cache.get_page(ResourceKind.SONG, 1, 3, first)
        payload = await cache.get_page(ResourceKind.SONG, 1, page_size, other)

        assert payload == "three-per-page"
        assert other.calls == 0

    @pytest.mark.asyncio
    async def test_expired_page_is_recomputed(self, cache, clock):
        old = CountingCompute("old")
        new = CountingCompute("new")

        await cache.get_page(ResourceKind.SINGER, 1, 3, old)
        clock.advance(59)
        assert await cache.get_page(ResourceKind.SINGER, 1, 3, new) == "old"

        clock.advance(1)
        assert await cache.get_page(ResourceKind.SINGER, 1, 3, new) == "new"
        assert new.calls == 1


class TestComputeFailure:
    @pytest.mark.asyncio
    async def test_failure_propagates_and_is_not_cached(self, cache):
        async def failing():
            raise RuntimeError("database is down")

        with pytest.raises(RuntimeError, match="database is down"):
            await cache.get_page(ResourceKind.RECORD, 1, 3, failing)

        assert len(cache.store) == 0

        retry = CountingCompute("recovered")
        assert await cache.get_page(ResourceKind.RECORD, 1, 3, retry) == "recovered"
        assert retry.calls == 1

    @pytest.mark.asyncio
    async def test_waiters_recompute_after_failure(self, cache):
        started = asyncio.Event()
        release = asyncio.Event()

        async def failing():
            started.set()
            await release.wait()
            raise ValueError("boom")

        first = asyncio.create_task(cache.get_page(ResourceKind.SONG, 1, 3, failing))
        await started.wait()
        fallback = CountingCompute("fresh")
        second = asyncio.create_task(cache.get_page(ResourceKind.SONG, 1, 3, fallback))
        await asyncio.sleep(0)
        release.set()

        with pytest.raises(ValueError):
            await first
        assert await second == "fresh"
        assert fallback.calls == 1


class TestInvalidate:
    @pytest.mark.asyncio
    async def test_invalidate_forces_recompute_for_every_page(self, cache):
        for page in (1, 2, 3):
            await cache.get_page(ResourceKind.SINGER, page, 3, CountingCompute(f"old-{page}"))

        deleted = await cache.invalidate(ResourceKind.SINGER)

        assert deleted == 3
        for page in (1, 2, 3):
            compute = CountingCompute(f"new-{page}")
            assert await cache.get_page(ResourceKind.SINGER, page, 3, compute) == f"new-{page}"
            assert compute.calls == 1

    @pytest.mark.asyncio
    async def test_invalidate_leaves_other_kinds(self, cache):
        await cache.get_page(ResourceKind.SINGER, 1, 3, CountingCompute("singers"))
        await cache.get_page(ResourceKind.RECORD, 1, 3, CountingCompute("records"))
        await cache.get_page(ResourceKind.SONG, 1, 3, CountingCompute("songs"))

        await cache.invalidate(ResourceKind.SINGER)

        record_compute = CountingCompute("records-new")
        song_compute = CountingCompute("songs-new")
        assert await cache.get_page(ResourceKind.RECORD, 1, 3, record_compute) == "records"
        assert await cache.get_page(ResourceKind.SONG, 1, 3, song_compute) == "songs"
        assert record_compute.calls == 0
        assert song_compute.calls == 0

    @pytest.mark.asyncio
    async def test_invalidate_without_entries(self, cache):
        assert await cache.invalidate(ResourceKind.SONG) == 0

    @pytest.mark.asyncio
    async def test_page_computed_across_invalidation_is_not_stored(self, cache):
        started = asyncio.Event()
        release = asyncio.Event()

        async def slow_old():
            started.set()
            await release.wait()
            return "before-invalidation"

        in_flight = asyncio.create_task(cache.get_page(ResourceKind.SINGER, 1, 3, slow_old))
        await started.wait()
        await cache.invalidate(ResourceKind.SINGER)
        release.set()

        assert await in_flight == "before-invalidation"
        fresh = CountingCompute("after-invalidation")
        assert await cache.get_page(ResourceKind.SINGER, 1, 3, fresh) == "after-invalidation"
        assert fresh.calls == 1

    @pytest.mark.asyncio
    async def test_clear_drops_every_kind(self, cache):
        await cache.get_page(ResourceKind.SINGER, 1, 3, CountingCompute("s"))
        await cache.get_page(ResourceKind.SONG, 1, 3, CountingCompute("t"))

        assert await cache.clear() == 2
        assert len(cache.store) == 0


class TestSingleFlight:
    @pytest.mark.asyncio
    async def test_concurrent_misses_compute_once(self, cache):
        calls = 0

        async def compute_slow():
            nonlocal calls
            calls += 1
            await asyncio.sleep(0.2)
            return '[{"id": 4}]'

        results = await asyncio.gather(*[
            cache.get_page(ResourceKind.RECORD, 2, 10, compute_slow) for _ in range(50)
        ])

        assert calls == 1
        assert set(results) == {'[{"id": 4}]'}

    @pytest.mark.asyncio
    async def test_unrelated_keys_do_not_wait(self, cache):
        release = asyncio.Event()

        async def blocked():
            await release.wait()
            return "blocked"

        slow = asyncio.create_task(cache.get_page(ResourceKind.RECORD, 1, 3, blocked))
        await asyncio.sleep(0)

        other = await asyncio.wait_for(
            cache.get_page(ResourceKind.RECORD, 2, 3, CountingCompute("page-2")),
            timeout=1,
        )
        assert other == "page-2"
        assert not slow.done()

        release.set()
        assert await slow == "blocked"

    @pytest.mark.asyncio
    async def test_fetch_locks_are_released(self, cache):
        await asyncio.gather(*[
            cache.get_page(ResourceKind.SINGER, page, 3, CountingCompute(str(page)))
            for page in (1, 1, 2, 3)
        ])

        assert cache._fetch_locks == {}
        assert cache._fetch_lock_users == {}
