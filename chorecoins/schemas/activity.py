"""Behavior, activity and todo schemas."""

from pydantic import BaseModel, Field

from chorecoins.domain.activity import RepeatType
from chorecoins.utils.money import NonNegativeMoney


class BehaviorCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)


class ActivityCreateRequest(BaseModel):
    """Request body for creating a standalone or behavior-grouped activity."""

    name: str = Field(..., min_length=1, max_length=120)
    money: NonNegativeMoney
    positive: bool = True
    top: bool = False
    repeat: RepeatType = RepeatType.NONE
    behavior_id: str | None = None


class ActivityUpdateRequest(BaseModel):
    """Partial activity edit; omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=120)
    money: NonNegativeMoney | None = None
    positive: bool | None = None
    top: bool | None = None
    repeat: RepeatType | None = None
    behavior_id: str | None = None


class QuantityChangeRequest(BaseModel):
    """Signed change to an activity's pending quantity (usually +1 or -1)."""

    delta: int = Field(..., ge=-1000, le=1000)


class TodoCreateRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=300)
    money: NonNegativeMoney
    repeat: RepeatType = RepeatType.ONCE
