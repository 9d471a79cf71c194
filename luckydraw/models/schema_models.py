from pydantic import BaseModel
from uuid import UUID
from datetime import datetime


class SignSchema(BaseModel):
    id: str
    level: int
    type: str
    reward_code: str

    class Config:
        from_attributes = True


class DrawRecordSchema(BaseModel):
    id: UUID
    guest_id: str
    draw_round: int
    won: bool
    tier: str | None
    prize_image_url: str | None
    created_at: datetime
    round_index: int | None

    class Config:
        from_attributes = True


class GuestRoundStateSchema(BaseModel):
    guest_id: str
    last_draw_round: int
    last_won: bool
    round_index: int
    version: int

    class Config:
        from_attributes = True


class PoolLevelCountSchema(BaseModel):
    level: int
    total: int
    drawn: int
