from typing import Iterable, List, Optional

import pytest

from luckydraw.create_sqlite_engine import create_sqlite_engine
from luckydraw.crud import CreateData
from luckydraw.db import create_session_factory
from luckydraw.init_db import create_tables


class ScriptedRandom:
    """RandomSource returning prepared values in order."""

    def __init__(self, randoms: Optional[Iterable[float]] = None, offsets: Optional[Iterable[int]] = None):
        self.randoms: List[float] = list(randoms or [])
        self.offsets: List[int] = list(offsets or [])
        self.randrange_calls: List[int] = []

    def random(self) -> float:
        if not self.randoms:
            raise AssertionError("ScriptedRandom ran out of random() values")
        return self.randoms.pop(0)

    def randrange(self, stop: int) -> int:
        self.randrange_calls.append(stop)
        if not self.offsets:
            raise AssertionError("ScriptedRandom ran out of randrange() values")
        return self.offsets.pop(0) % stop


def sign_row(sign_id: str, level: int = 0, type: str = "Empty", reward_code: str = "EMPTY") -> dict:
    return {
        "id": sign_id,
        "level": level,
        "type": type,
        "reward_code": reward_code,
        "is_drawn": False,
    }


@pytest.fixture
async def engine(tmp_path):
    engine = create_sqlite_engine(tmp_path / "luckydraw_test.sqlite3")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def Session(engine):
    return create_session_factory(engine)


@pytest.fixture
def seed_signs(Session):
    async def _seed(rows: List[dict]) -> None:
        async with Session() as session:
            async with session.begin():
                await CreateData.add_signs(rows, session)

    return _seed
