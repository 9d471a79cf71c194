"""Seed layout of the finite sign pool (v1)."""

from dataclasses import dataclass

from luckydraw.domain.sign_display import SignLevel

BATCH_SIZE = 500


@dataclass(frozen=True)
class PoolEntry:
    level: SignLevel
    type: str
    reward_code: str
    count: int


POOL_LAYOUT = [
    PoolEntry(level=SignLevel.top_top, type="Top-Top", reward_code="R01", count=40),
    PoolEntry(level=SignLevel.top, type="Top", reward_code="R02", count=200),
    PoolEntry(level=SignLevel.special, type="Special", reward_code="R03", count=150),
    PoolEntry(level=SignLevel.empty, type="Empty", reward_code="EMPTY", count=9610),
]


def sign_id(level: int, running_index: int) -> str:
    """S{level:02d}-{index:04d}, e.g. S01-0001."""
    return f"S{int(level):02d}-{running_index:04d}"


def expected_total(pool_layout: list[PoolEntry] = POOL_LAYOUT) -> int:
    return sum(entry.count for entry in pool_layout)


def generate_sign_rows(pool_layout: list[PoolEntry] = POOL_LAYOUT) -> list[dict]:
    """Rows for the signs table, all undrawn."""
    return [
        {
            "id": sign_id(entry.level, index),
            "level": int(entry.level),
            "type": entry.type,
            "reward_code": entry.reward_code,
            "is_drawn": False,
        }
        for entry in pool_layout
        for index in range(1, entry.count + 1)
    ]


def batched(rows: list[dict], size: int = BATCH_SIZE) -> list[list[dict]]:
    return [rows[i : i + size] for i in range(0, len(rows), size)]
