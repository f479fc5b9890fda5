"""Pending reward schemas."""

from pydantic import BaseModel, Field

from chorecoins.domain.pending import PendingType
from chorecoins.utils.money import Money


class PendingProposeRequest(BaseModel):
    """Request body for proposing a balance change."""

    amount: Money
    reason: str = Field(..., min_length=1, max_length=500)
    type: PendingType = PendingType.ADJUSTMENT
    reference_id: str | None = None


class PendingUpdateRequest(BaseModel):
    amount: Money | None = None
    reason: str | None = Field(default=None, max_length=500)
