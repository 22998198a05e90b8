"""Fill the catalog database with demo singers, records and songs.

Creates the tables if needed, then inserts (by default) 10 singers, 20
records spread randomly over them and 20 songs spread randomly over the
records. Reads DATABASE_URL from .env by default.

Usage:
    python -m discapi.scripts.seed_catalog
    python -m discapi.scripts.seed_catalog --singers 50 --records 200 --songs 1000
"""

from __future__ import annotations

import argparse
import asyncio
import random
from datetime import time
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from discapi.database import (
    Record,
    Singer,
    Song,
    create_tables,
    dispose_engine,
    get_db_session_context,
    init_engine,
)

SEED = 42

_FIRST_NAMES = [
    "Nina", "Edith", "Jacques", "Serge", "Barbara", "Georges", "Juliette",
    "Charles", "Françoise", "Léo", "Billie", "Ella", "Miles", "Aretha",
]
_LAST_NAMES = [
    "Simone", "Piaf", "Brel", "Gainsbourg", "Brassens", "Gréco", "Aznavour",
    "Hardy", "Ferré", "Holiday", "Fitzgerald", "Davis", "Franklin", "Trenet",
]
_WORDS = [
    "blue", "night", "river", "paris", "rain", "morning", "velvet", "train",
    "garden", "silence", "summer", "letter", "moon", "street", "fire", "winter",
]


def _title(rng: random.Random) -> str:
    words = rng.sample(_WORDS, k=rng.randint(2, 4))
    return " ".join(words).capitalize()


def _duration(rng: random.Random) -> time:
    return time(minute=rng.randint(1, 9), second=rng.randint(0, 59))


async def seed_catalog(
    session: AsyncSession,
    rng: random.Random,
    singers: int = 10,
    records: int = 20,
    songs: int = 20,
) -> None:
    """Insert demo rows; each record gets a random singer, each song a random record."""
    singer_rows: List[Singer] = [
        Singer(name=rng.choice(_FIRST_NAMES), last_name=rng.choice(_LAST_NAMES))
        for _ in range(singers)
    ]
    session.add_all(singer_rows)
    await session.flush()

    record_rows: List[Record] = [
        Record(name=_title(rng), singer_id=rng.choice(singer_rows).id)
        for _ in range(records)
    ]
    session.add_all(record_rows)
    await session.flush()

    session.add_all(
        Song(
            name=_title(rng),
            duration=_duration(rng),
            record_id=rng.choice(record_rows).id if record_rows else None,
        )
        for _ in range(songs)
    )
    await session.commit()


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="python -m discapi.scripts.seed_catalog",
        description="Insert demo singers, records and songs into the catalog database.",
    )
    parser.add_argument(
        "--database-url",
        type=str,
        default=None,
        help="Async SQLAlchemy URL. Defaults to DATABASE_URL from .env.",
    )
    parser.add_argument("--seed", type=int, default=SEED, help="RNG seed.")
    parser.add_argument("--singers", type=int, default=10, help="Number of singers.")
    parser.add_argument("--records", type=int, default=20, help="Number of records.")
    parser.add_argument("--songs", type=int, default=20, help="Number of songs.")
    args = parser.parse_args(argv)
    if args.singers < 1 and args.records > 0:
        parser.error("records need at least one singer")
    return args


async def _run(args: argparse.Namespace) -> None:
    if args.database_url is not None:
        database_url = args.database_url
    else:
        from discapi.config import get_settings
        database_url = get_settings().database_url

    init_engine(database_url)
    try:
        await create_tables()
        async with get_db_session_context() as session:
            await seed_catalog(
                session,
                random.Random(args.seed),
                singers=args.singers,
                records=args.records,
                songs=args.songs,
            )
    finally:
        await dispose_engine()


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    print(f"Seeding catalog: singers={args.singers} records={args.records} songs={args.songs}")
    asyncio.run(_run(args))
    print("Done.")


if __name__ == "__main__":
    main()
