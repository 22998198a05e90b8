"""
Tests for committing a change and then invalidating its cached pages.
"""

import pytest
from unittest.mock import AsyncMock

from sqlalchemy.exc import IntegrityError

from conftest import CountingCompute
from discapi.cache import ResourceKind, commit_and_invalidate


class TestCommitAndInvalidate:
    @pytest.mark.asyncio
    async def test_invalidates_each_kind_after_commit(self, cache):
        session = AsyncMock()
        await cache.get_page(ResourceKind.SINGER, 1, 3, CountingCompute("singers"))
        await cache.get_page(ResourceKind.RECORD, 1, 3, CountingCompute("records"))
        await cache.get_page(ResourceKind.SONG, 1, 3, CountingCompute("songs"))

        deleted = await commit_and_invalidate(
            session, cache, ResourceKind.SINGER, ResourceKind.RECORD
        )

        assert deleted == 2
        session.commit.assert_awaited_once()
        recompute = CountingCompute("songs again")
        assert await cache.get_page(ResourceKind.SONG, 1, 3, recompute) == "songs"
        assert recompute.calls == 0

    @pytest.mark.asyncio
    async def test_failed_commit_keeps_cached_pages(self, cache):
        session = AsyncMock()
        session.commit.side_effect = IntegrityError("INSERT", {}, Exception("constraint"))
        await cache.get_page(ResourceKind.SINGER, 1, 3, CountingCompute("cached"))

        with pytest.raises(IntegrityError):
            await commit_and_invalidate(session, cache, ResourceKind.SINGER)

        compute = CountingCompute("recomputed")
        assert await cache.get_page(ResourceKind.SINGER, 1, 3, compute) == "cached"
        assert compute.calls == 0
        assert await cache.store.generation(ResourceKind.SINGER.tag) == 0
