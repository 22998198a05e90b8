"""
Tests for the demo-data seeding script.
"""

import random

import pytest
from sqlalchemy import func, select

from discapi.database import (
    Record,
    Singer,
    Song,
    create_tables,
    dispose_engine,
    get_db_session_context,
    init_engine,
)
from discapi.scripts.seed_catalog import parse_args, seed_catalog


class TestSeedCatalog:

    @pytest.mark.asyncio
    async def test_inserts_requested_counts(self, tmp_path):
        init_engine(f"sqlite+aiosqlite:///{tmp_path / 'seed.db'}")
        try:
            await create_tables()
            async with get_db_session_context() as session:
                await seed_catalog(session, random.Random(1), singers=4, records=6, songs=9)

            async with get_db_session_context() as session:
                counts = [
                    (await session.execute(select(func.count()).select_from(model))).scalar_one()
                    for model in (Singer, Record, Song)
                ]
                orphan_records = (
                    await session.execute(
                        select(func.count()).select_from(Record).where(Record.singer_id.is_(None))
                    )
                ).scalar_one()
        finally:
            await dispose_engine()

        assert counts == [4, 6, 9]
        assert orphan_records == 0

    def test_default_arguments(self):
        args = parse_args([])

        assert (args.singers, args.records, args.songs) == (10, 20, 20)
        assert args.database_url is None

    def test_records_need_a_singer(self):
        with pytest.raises(SystemExit):
            parse_args(["--singers", "0", "--records", "3"])
