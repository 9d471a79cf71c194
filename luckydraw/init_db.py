"""Create the signs, draw_records and guest_round_state tables.

Existing tables and indexes are left untouched, so the script can be re-run.

    python -m luckydraw.init_db
"""

import argparse
import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from luckydraw.db import engine
from luckydraw.models.schemas import Base


async def create_tables(engine: AsyncEngine) -> None:
    """Create table if not exists"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logging.info(f"Tables ready: {', '.join(sorted(Base.metadata.tables))}")


def get_parser() -> argparse.ArgumentParser:
    return argparse.ArgumentParser(description="Create the lucky draw tables")


async def main() -> None:
    try:
        await create_tables(engine)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    get_parser().parse_args()
    asyncio.run(main())
