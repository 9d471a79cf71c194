"""Seed the finite sign pool and verify it.

    python -m luckydraw.init_pool            # empty the signs table, then seed
    python -m luckydraw.init_pool --no-truncate

Exits with status 1 when the seeded pool does not match POOL_LAYOUT.
"""

import argparse
import asyncio
import logging
import sys
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from luckydraw.crud import CreateData, DeleteData, ReadData
from luckydraw.db import Session, engine
from luckydraw.domain.pool_layout import (
    POOL_LAYOUT,
    PoolEntry,
    batched,
    expected_total,
    generate_sign_rows,
)
from luckydraw.init_db import create_tables
from luckydraw.models.schema_models import PoolLevelCountSchema


class PoolVerificationError(RuntimeError):
    pass


async def seed_pool(
    Session: async_sessionmaker[AsyncSession],
    pool_layout: List[PoolEntry] = POOL_LAYOUT,
    truncate: bool = True,
) -> int:
    """Insert every sign of pool_layout in one transaction, 500 rows per INSERT

    Args:
        Session (async_sessionmaker[AsyncSession]): Session factory of the target store
        pool_layout (List[PoolEntry]): Levels, labels and counts to seed
        truncate (bool): Delete the existing signs first

    Returns:
        int: Number of inserted signs
    """
    rows = generate_sign_rows(pool_layout)
    async with Session() as session:
        async with session.begin():
            if truncate:
                await DeleteData.delete_all_signs(session)
            for batch in batched(rows):
                await CreateData.add_signs(batch, session)
    logging.info(f"Seeded {len(rows)} signs")
    return len(rows)


async def verify_pool(
    Session: async_sessionmaker[AsyncSession],
    pool_layout: List[PoolEntry] = POOL_LAYOUT,
) -> List[PoolLevelCountSchema]:
    """Check total, per-level counts, distinct ids and that nothing is drawn yet

    Raises:
        PoolVerificationError: The stored pool differs from pool_layout
    """
    async with Session() as session:
        level_counts = await ReadData.count_signs_by_level(session)
        distinct_ids = await ReadData.count_distinct_sign_ids(session)

    total = sum(count.total for count in level_counts)
    expected = expected_total(pool_layout)
    if total != expected:
        raise PoolVerificationError(f"total rows {total} != {expected}")

    by_level = {count.level: count for count in level_counts}
    for entry in pool_layout:
        count = by_level.get(int(entry.level))
        stored = count.total if count is not None else 0
        if stored != entry.count:
            raise PoolVerificationError(f"level {int(entry.level)} count {stored} != {entry.count}")

    if distinct_ids != expected:
        raise PoolVerificationError(f"distinct ids {distinct_ids} != {expected}")

    drawn = sum(count.drawn for count in level_counts)
    if drawn != 0:
        raise PoolVerificationError(f"drawn count {drawn} != 0")
    return level_counts


def get_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Seed the lucky draw sign pool")
    parser.add_argument(
        "--truncate",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Delete existing signs before seeding",
    )
    return parser


async def main(truncate: bool) -> int:
    try:
        await create_tables(engine)
        await seed_pool(Session, truncate=truncate)
        level_counts = await verify_pool(Session)
    except PoolVerificationError as e:
        logging.error(f"Verification failed: {e}")
        return 1
    finally:
        await engine.dispose()

    types = {int(entry.level): entry.type for entry in POOL_LAYOUT}
    print("--- Summary ---")
    print("Total rows:", sum(count.total for count in level_counts))
    print("Counts per level:")
    for count in level_counts:
        print(f"  level {count.level} ({types.get(count.level, '?')}): {count.total}")
    print("Pool initialization complete")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    args = get_parser().parse_args()
    sys.exit(asyncio.run(main(args.truncate)))
