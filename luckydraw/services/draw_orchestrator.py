"""Guaranteed-eventual-win draw (v2).

- Each draw appends one immutable draw record and never touches older ones.
- The guest's round state is a versioned row written in the same transaction
  as the record. A concurrent draw of the same guest changes the version (or
  inserts the row first), which turns this attempt into a conflict; the retry
  re-reads the committed state, so the two draws end up serialized.
- Guests that only have draw records (no state row yet) are resolved from
  their latest record.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from uuid6 import uuid7

from luckydraw.crud import CreateData, ReadData, UpdateData
from luckydraw.domain.draw_rules import (
    PriorDraw,
    prize_image_url,
    resolve_round,
    roll_outcome,
)
from luckydraw.domain.randomness import RandomSource, default_random_source
from luckydraw.load_secrets import prize_image_base_url as configured_prize_image_base_url
from luckydraw.models.dc_models import DrawV2ResultModel
from luckydraw.models.schema_models import DrawRecordSchema, GuestRoundStateSchema
from luckydraw.models.schemas import utc_now
from luckydraw.services.errors import GuestIdValidationError, RoundStateConflictError
from luckydraw.services.retry import (
    AttemptOutcome,
    AttemptStatus,
    configured_max_attempts,
    run_with_bounded_retry,
)

GUEST_ID_MAX_LENGTH = 64


def normalize_guest_id(guest_id: str | None) -> str:
    if guest_id is None or not str(guest_id).strip():
        raise GuestIdValidationError()
    guest_id = str(guest_id).strip()
    if len(guest_id) > GUEST_ID_MAX_LENGTH:
        raise GuestIdValidationError(f"guest_id must be at most {GUEST_ID_MAX_LENGTH} characters")
    return guest_id


async def read_prior_draw(
    guest_id: str, session: AsyncSession
) -> tuple[PriorDraw | None, GuestRoundStateSchema | None]:
    """Read what the next draw of a guest depends on

    Args:
        guest_id (str): To identify the guest
        session (AsyncSession): Session holding the draw transaction

    Returns:
        tuple[PriorDraw | None, GuestRoundStateSchema | None]: The prior draw and the
        state row it came from (None when it came from the record history)
    """
    state = await ReadData.read_round_state(guest_id, session)
    if state is not None:
        return (
            PriorDraw(draw_round=state.last_draw_round, won=state.last_won, round_index=state.round_index),
            state,
        )

    latest = await ReadData.read_latest_draw_record(guest_id, session)
    if latest is None:
        return None, None
    return PriorDraw(draw_round=latest.draw_round, won=latest.won, round_index=latest.round_index), None


class DrawOrchestrator:
    def __init__(
        self,
        Session: async_sessionmaker[AsyncSession],
        rng: RandomSource | None = None,
        max_attempts: int | None = None,
        prize_image_base_url: str | None = configured_prize_image_base_url,
    ):
        self.Session = Session
        self.rng = rng or default_random_source()
        self.max_attempts = max_attempts or configured_max_attempts()
        self.prize_image_base_url = prize_image_base_url

    async def draw(self, guest_id: str | None) -> DrawV2ResultModel:
        """Run one v2 draw for a guest

        Args:
            guest_id (str | None): Participant identifier sent by the client

        Raises:
            GuestIdValidationError: guest_id is missing, blank or too long (nothing is written)
            RoundStateConflictError: Concurrent draws of the same guest conflicted on every attempt

        Returns:
            DrawV2ResultModel: Round, outcome, tier and message of the draw
        """
        guest_id = normalize_guest_id(guest_id)

        async def attempt() -> AttemptOutcome[DrawV2ResultModel]:
            return await self.attempt(guest_id)

        outcome = await run_with_bounded_retry(
            attempt, self.max_attempts, label=f"draw for guest {guest_id}"
        )
        if outcome.status != AttemptStatus.success:
            raise RoundStateConflictError(guest_id, self.max_attempts)

        result = outcome.value
        logging.info(
            f"Guest {guest_id} drew round {result.draw_round}: won={result.won} tier={result.tier}"
        )
        return result

    async def attempt(self, guest_id: str) -> AttemptOutcome[DrawV2ResultModel]:
        """Run one draw transaction. The transaction is rolled back on every path but success."""
        async with self.Session() as session:
            try:
                prior, state = await read_prior_draw(guest_id, session)
                decision = resolve_round(prior)
                outcome = roll_outcome(decision, self.rng)
                tier = outcome.tier.value if outcome.tier is not None else None
                image_url = prize_image_url(outcome.tier, self.prize_image_base_url)

                await CreateData.add_draw_record(
                    DrawRecordSchema(
                        id=uuid7(),
                        guest_id=guest_id,
                        draw_round=outcome.draw_round,
                        won=outcome.won,
                        tier=tier,
                        prize_image_url=image_url,
                        created_at=utc_now(),
                        round_index=outcome.round_index,
                    ),
                    session,
                )

                new_state = GuestRoundStateSchema(
                    guest_id=guest_id,
                    last_draw_round=outcome.draw_round,
                    last_won=outcome.won,
                    round_index=outcome.round_index,
                    version=state.version + 1 if state is not None else 1,
                )
                if state is None:
                    try:
                        await CreateData.add_round_state(new_state, session)
                    except IntegrityError:
                        # another first draw of this guest inserted the row
                        await session.rollback()
                        return AttemptOutcome.conflict()
                elif not await UpdateData.update_round_state(new_state, state.version, session):
                    await session.rollback()
                    return AttemptOutcome.conflict()

                await session.commit()
            except Exception:
                await session.rollback()
                raise

        return AttemptOutcome.success(
            DrawV2ResultModel(
                won=outcome.won,
                tier=tier,
                draw_round=outcome.draw_round,
                message=outcome.message,
                guest_id=guest_id,
                prize_image_url=image_url,
            )
        )
