from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from enum import Enum
from typing import Optional

from luckydraw.models.schema_models import SignSchema


class DrawStatusModel(str, Enum):
    ok = "OK"
    out_of_stock = "OUT_OF_STOCK"


class DrawSchemeModel(str, Enum):
    v1 = "v1"  # finite pool, display-mapped
    v2 = "v2"  # rounds and tiers


class AllocationResultModel(BaseModel):
    """Result of one v1 pool draw: status OK with a sign, or OUT_OF_STOCK."""

    status: DrawStatusModel
    sign: Optional[SignSchema] = None

    @classmethod
    def allocated(cls, sign: SignSchema) -> "AllocationResultModel":
        return cls(status=DrawStatusModel.ok, sign=sign)

    @classmethod
    def out_of_stock(cls) -> "AllocationResultModel":
        return cls(status=DrawStatusModel.out_of_stock)

    @property
    def is_out_of_stock(self) -> bool:
        return self.status == DrawStatusModel.out_of_stock

    def to_response(self) -> dict:
        if self.is_out_of_stock:
            return {"status": DrawStatusModel.out_of_stock.value}
        return {"status": self.status.value, "sign": self.sign.model_dump()}


class SignDisplayModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    type: str
    title: str
    level: int
    description: str
    image_url: str = Field("", serialization_alias="imageUrl")


class DrawV2RequestModel(BaseModel):
    guest_id: Optional[str] = Field(
        None, validation_alias=AliasChoices("guest_id", "guestId")
    )


class DrawV2ResultModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    won: bool
    tier: Optional[str]
    draw_round: int = Field(serialization_alias="drawRound")
    message: str
    guest_id: str = Field(serialization_alias="guestId")
    prize_image_url: Optional[str] = Field(None, serialization_alias="prizeImageUrl")

    def to_response(self) -> dict:
        # prizeImageUrl is only part of a winning response
        exclude = None if self.won else {"prize_image_url"}
        return self.model_dump(by_alias=True, exclude=exclude)
