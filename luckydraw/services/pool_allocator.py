"""Finite pool draw (v1).

- One attempt is one transaction: COUNT -> random OFFSET -> SELECT FOR UPDATE
  -> conditional UPDATE.
- The row lock taken by SELECT FOR UPDATE is the only coordination between
  concurrent allocators.
- A lost race rolls the attempt back and is retried; a race lost on the last
  attempt is reported as OUT_OF_STOCK.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from luckydraw.crud import ReadData, UpdateData
from luckydraw.domain.randomness import RandomSource, default_random_source
from luckydraw.models.dc_models import AllocationResultModel
from luckydraw.models.schema_models import SignSchema
from luckydraw.services.retry import (
    AttemptOutcome,
    AttemptStatus,
    configured_max_attempts,
    run_with_bounded_retry,
)


class PoolAllocator:
    """Hands out each sign of the pool to exactly one caller."""

    def __init__(
        self,
        Session: async_sessionmaker[AsyncSession],
        rng: RandomSource | None = None,
        max_attempts: int | None = None,
    ):
        self.Session = Session
        self.rng = rng or default_random_source()
        self.max_attempts = max_attempts or configured_max_attempts()

    async def allocate(self) -> AllocationResultModel:
        """Draw one undrawn sign

        Returns:
            AllocationResultModel: OK with the drawn sign, or OUT_OF_STOCK
        """
        outcome = await run_with_bounded_retry(
            self.attempt, self.max_attempts, label="sign allocation"
        )
        if outcome.status == AttemptStatus.success:
            logging.info(f"Allocated sign {outcome.value.id} (level {outcome.value.level})")
            return AllocationResultModel.allocated(outcome.value)
        if outcome.status == AttemptStatus.conflict:
            logging.warning(
                f"Sign allocation kept conflicting after {self.max_attempts} attempts, reporting out of stock"
            )
        else:
            logging.info("Sign pool is out of stock")
        return AllocationResultModel.out_of_stock()

    async def attempt(self) -> AttemptOutcome[SignSchema]:
        """Run one allocation transaction. The transaction is rolled back on every path but success."""
        async with self.Session() as session:
            try:
                undrawn_count = await ReadData.count_undrawn_signs(session)
                if undrawn_count == 0:
                    await session.rollback()
                    return AttemptOutcome.exhausted()

                offset = self.rng.randrange(undrawn_count)
                sign = await ReadData.read_undrawn_sign_for_update(offset, session)
                if sign is None:
                    # rows under the offset were drawn between COUNT and SELECT
                    await session.rollback()
                    return AttemptOutcome.conflict()

                if not await UpdateData.mark_sign_drawn(sign.id, session):
                    await session.rollback()
                    return AttemptOutcome.conflict()

                await session.commit()
                return AttemptOutcome.success(sign)
            except Exception:
                await session.rollback()
                raise
