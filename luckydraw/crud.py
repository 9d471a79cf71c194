"""Persistence helpers for signs, draw records and guest round state.

None of these commit: the service layer owns the transaction and decides
whether it is committed or rolled back.
"""

from typing import List

from sqlalchemy import case, delete, desc, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from luckydraw.models.schema_models import (
    DrawRecordSchema,
    GuestRoundStateSchema,
    PoolLevelCountSchema,
    SignSchema,
)
from luckydraw.models.schemas import DrawRecord, GuestRoundState, Sign, utc_now


class ReadData:
    @staticmethod
    async def count_undrawn_signs(session: AsyncSession) -> int:
        """Count signs that have not been drawn yet

        Returns:
            int: Number of undrawn signs
        """
        stmt = select(func.count()).select_from(Sign).where(Sign.is_drawn.is_(False))
        result = await session.execute(stmt)
        return int(result.scalar_one())

    @staticmethod
    async def read_undrawn_sign_for_update(offset: int, session: AsyncSession) -> SignSchema | None:
        """Read the undrawn sign at offset (ordered by id) and lock its row

        Args:
            offset (int): Position among the undrawn signs, 0 <= offset < count
            session (AsyncSession): Session holding the allocation transaction

        Returns:
            SignSchema | None: The locked sign, None when no row is left at that offset
        """
        stmt = (
            select(Sign)
            .where(Sign.is_drawn.is_(False))
            .order_by(Sign.id)
            .offset(offset)
            .limit(1)
            .with_for_update()
        )
        result = await session.execute(stmt)
        result = result.scalars().first()

        if result is None:
            return None

        return SignSchema.model_validate(result)

    @staticmethod
    async def read_latest_draw_record(guest_id: str, session: AsyncSession) -> DrawRecordSchema | None:
        """Read the latest draw record of a guest

        Args:
            guest_id (str): To identify the guest

        Returns:
            DrawRecordSchema | None: Latest draw record, None if the guest never drew
        """
        stmt = (
            select(DrawRecord)
            .where(DrawRecord.guest_id == guest_id)
            .order_by(desc(DrawRecord.created_at), desc(DrawRecord.id))
            .limit(1)
        )
        result = await session.execute(stmt)
        result = result.scalars().first()

        if result is None:
            return None

        return DrawRecordSchema.model_validate(result)

    @staticmethod
    async def read_draw_records(guest_id: str, session: AsyncSession) -> List[DrawRecordSchema]:
        """Read all draw records of a guest, oldest first"""
        stmt = (
            select(DrawRecord)
            .where(DrawRecord.guest_id == guest_id)
            .order_by(DrawRecord.created_at, DrawRecord.id)
        )
        result = await session.execute(stmt)
        return [DrawRecordSchema.model_validate(row) for row in result.scalars().all()]

    @staticmethod
    async def read_round_state(guest_id: str, session: AsyncSession) -> GuestRoundStateSchema | None:
        stmt = select(GuestRoundState).where(GuestRoundState.guest_id == guest_id)
        result = await session.execute(stmt)
        result = result.scalars().first()

        if result is None:
            return None

        return GuestRoundStateSchema.model_validate(result)

    @staticmethod
    async def count_signs_by_level(session: AsyncSession) -> List[PoolLevelCountSchema]:
        """Count total and drawn signs per level

        Returns:
            List[PoolLevelCountSchema]: One entry per level, ordered by level
        """
        drawn = func.sum(case((Sign.is_drawn.is_(True), 1), else_=0))
        stmt = (
            select(Sign.level, func.count(), drawn)
            .group_by(Sign.level)
            .order_by(Sign.level)
        )
        result = await session.execute(stmt)
        return [
            PoolLevelCountSchema(level=level, total=total, drawn=int(drawn_count or 0))
            for level, total, drawn_count in result.all()
        ]

    @staticmethod
    async def count_distinct_sign_ids(session: AsyncSession) -> int:
        result = await session.execute(select(func.count(func.distinct(Sign.id))))
        return int(result.scalar_one())

    @staticmethod
    async def count_draw_records(session: AsyncSession) -> int:
        result = await session.execute(select(func.count()).select_from(DrawRecord))
        return int(result.scalar_one())


class CreateData:
    @staticmethod
    async def add_draw_record(record: DrawRecordSchema, session: AsyncSession) -> None:
        """Add an immutable draw record (no commit)

        Args:
            record (DrawRecordSchema): Round, outcome and tier of one v2 draw
        """
        new_record = DrawRecord(
            id=record.id,
            guest_id=record.guest_id,
            draw_round=record.draw_round,
            won=record.won,
            tier=record.tier,
            prize_image_url=record.prize_image_url,
            created_at=record.created_at,
            round_index=record.round_index,
        )
        session.add(new_record)

    @staticmethod
    async def add_round_state(state: GuestRoundStateSchema, session: AsyncSession) -> None:
        """Insert the first round state row of a guest and flush it

        A concurrent first draw of the same guest makes the flush fail with
        IntegrityError on the primary key.
        """
        new_state = GuestRoundState(
            guest_id=state.guest_id,
            last_draw_round=state.last_draw_round,
            last_won=state.last_won,
            round_index=state.round_index,
            version=state.version,
            updated_at=utc_now(),
        )
        session.add(new_state)
        await session.flush()

    @staticmethod
    async def add_signs(rows: List[dict], session: AsyncSession) -> None:
        """Bulk insert sign rows (no commit)"""
        await session.execute(insert(Sign), rows)


class UpdateData:
    @staticmethod
    async def mark_sign_drawn(sign_id: str, session: AsyncSession) -> bool:
        """Mark a sign drawn, guarded by "still undrawn"

        Args:
            sign_id (str): To identify the sign

        Returns:
            bool: False when another allocator drew the sign first
        """
        stmt = (
            update(Sign)
            .where(Sign.id == sign_id, Sign.is_drawn.is_(False))
            .values(is_drawn=True)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount == 1

    @staticmethod
    async def update_round_state(
        state: GuestRoundStateSchema, expected_version: int, session: AsyncSession
    ) -> bool:
        """Overwrite a guest's round state if nobody else changed it meanwhile

        Args:
            state (GuestRoundStateSchema): New state, version already incremented
            expected_version (int): Version read at the start of the draw

        Returns:
            bool: False when the stored version no longer matches
        """
        stmt = (
            update(GuestRoundState)
            .where(
                GuestRoundState.guest_id == state.guest_id,
                GuestRoundState.version == expected_version,
            )
            .values(
                last_draw_round=state.last_draw_round,
                last_won=state.last_won,
                round_index=state.round_index,
                version=state.version,
                updated_at=utc_now(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount == 1


class DeleteData:
    @staticmethod
    async def delete_all_signs(session: AsyncSession) -> None:
        """Empty the pool before reseeding (no commit)"""
        await session.execute(delete(Sign).execution_options(synchronize_session=False))
