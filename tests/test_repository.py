"""
Unit tests for the shared query helpers.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from discapi.database import Singer, fetch_page
from discapi.database.repository import MAX_SQL_OFFSET


class TestFetchPage:
    @pytest.mark.asyncio
    async def test_offset_past_integer_range_skips_query(self):
        session = AsyncMock()

        rows = await fetch_page(session, Singer, 99999999999999999999, 3)

        assert rows == []
        session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_largest_offset_still_queries(self):
        session = AsyncMock()
        result = MagicMock()
        result.scalars.return_value.all.return_value = []
        session.execute.return_value = result

        await fetch_page(session, Singer, MAX_SQL_OFFSET + 1, 1)

        session.execute.assert_awaited_once()
