"""Entertainment catalog schemas."""

from pydantic import BaseModel, Field

from chorecoins.utils.money import NonNegativeMoney


class EntertainmentUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    image: str | None = None
    minutes_per_coin: int | None = Field(default=None, gt=0)
    cost_per_coin: NonNegativeMoney | None = None
    visible: bool | None = None
    description: str | None = Field(default=None, max_length=500)


class PurchaseRequest(BaseModel):
    """Number of coins to spend on one entertainment."""

    coins: int = Field(..., ge=1, le=1000)
