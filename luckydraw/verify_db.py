"""Print the state of the lucky draw store; also a quick connectivity check.

    python -m luckydraw.verify_db
"""

import argparse
import asyncio
import logging
import sys

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from luckydraw.crud import ReadData
from luckydraw.db import Session, engine
from luckydraw.services.errors import is_connectivity_error


async def collect_summary(Session: async_sessionmaker[AsyncSession]) -> dict:
    async with Session() as session:
        level_counts = await ReadData.count_signs_by_level(session)
        draw_records = await ReadData.count_draw_records(session)
    total = sum(count.total for count in level_counts)
    drawn = sum(count.drawn for count in level_counts)
    return {
        "signs": total,
        "drawn": drawn,
        "undrawn": total - drawn,
        "levels": [count.model_dump() for count in level_counts],
        "draw_records": draw_records,
    }


def get_parser() -> argparse.ArgumentParser:
    return argparse.ArgumentParser(description="Show sign pool and draw record counts")


async def main() -> int:
    try:
        summary = await collect_summary(Session)
    except Exception as e:
        if is_connectivity_error(e):
            logging.error(f"Database connection failed: {e!r}")
            return 1
        raise
    finally:
        await engine.dispose()

    print("Database connection successful")
    print("signs row count:", summary["signs"])
    print("drawn / undrawn:", summary["drawn"], "/", summary["undrawn"])
    for level in summary["levels"]:
        print(f"  level {level['level']}: {level['drawn']}/{level['total']} drawn")
    print("draw_records row count:", summary["draw_records"])
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    get_parser().parse_args()
    sys.exit(asyncio.run(main()))
