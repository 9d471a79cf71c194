from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.schema import Column, Index
from sqlalchemy.types import Boolean, DateTime, Integer, SmallInteger, String, Uuid
from uuid6 import uuid7
from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class Sign(Base):
    __tablename__ = "signs"
    id = Column(String(10), primary_key=True)  # S{level:02d}-{index:04d}
    level = Column(Integer, nullable=False)
    type = Column(String(10), nullable=False)
    reward_code = Column(String(10), nullable=False)
    is_drawn = Column(Boolean, nullable=False, default=False)


class DrawRecord(Base):
    __tablename__ = "draw_records"
    id = Column(Uuid, primary_key=True, default=uuid7)
    guest_id = Column(String(64), nullable=False)
    draw_round = Column(SmallInteger, nullable=False)  # 1 or 2
    won = Column(Boolean, nullable=False)
    tier = Column(String(32), nullable=True)  # NULL when the draw was lost
    prize_image_url = Column("prizeImageUrl", String(512), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    round_index = Column(Integer, nullable=True)  # +1 on the first draw after a round 2


Index(
    "idx_draw_records_guest_created",
    DrawRecord.guest_id,
    DrawRecord.created_at.desc(),
)


class GuestRoundState(Base):
    __tablename__ = "guest_round_state"
    guest_id = Column(String(64), primary_key=True)
    last_draw_round = Column(SmallInteger, nullable=False)
    last_won = Column(Boolean, nullable=False)
    round_index = Column(Integer, nullable=False)
    version = Column(Integer, nullable=False, default=1)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
