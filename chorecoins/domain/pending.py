"""Pending reward items awaiting approval or denial."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, ValidationError, model_validator

from chorecoins.store import keys
from chorecoins.store.base import Item
from chorecoins.utils.errors import InvalidInputError
from chorecoins.utils.money import Money, money_str
from chorecoins.utils.time import parse_iso_datetime


class PendingType(str, Enum):
    """Source of a proposed balance change."""

    ADJUSTMENT = "adjustment"
    ACTIVITY = "activity"
    TODO = "todo"


class PendingReward(BaseModel):
    """A proposed balance change that has not been settled yet."""

    pending_id: str
    user_id: str
    amount: Money
    reason: str = Field(..., min_length=1)
    type: PendingType = PendingType.ADJUSTMENT
    reference_id: str | None = None
    created_at: datetime

    @model_validator(mode="after")
    def _check_reference(self) -> PendingReward:
        self.reason = self.reason.strip()
        if not self.reason:
            raise ValueError("Reason is required")
        if self.type is not PendingType.ADJUSTMENT and not self.reference_id:
            raise ValueError(f"{self.type.value} pending items need a reference id")
        return self

    def refers_to(self, pending_type: PendingType, reference_id: str) -> bool:
        return self.type is pending_type and self.reference_id == reference_id

    def to_item(self) -> Item:
        return {
            "partition_key": keys.user_pk(self.user_id),
            "sort_key": keys.pending_sk(self.pending_id),
            "pending_id": self.pending_id,
            "user_id": self.user_id,
            "amount": money_str(self.amount),
            "reason": self.reason,
            "type": self.type.value,
            "reference_id": self.reference_id,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_item(cls, item: Item) -> PendingReward:
        data: dict[str, Any] = {
            "pending_id": item.get("pending_id") or item.get("pendingId"),
            "user_id": item.get("user_id")
            or item.get("userId")
            or keys.user_id_from_pk(str(item["partition_key"])),
            "amount": item.get("amount", 0),
            "reason": item.get("reason"),
            "type": item.get("type") or PendingType.ADJUSTMENT.value,
            "reference_id": item.get("reference_id") or item.get("referenceId"),
            "created_at": parse_iso_datetime(item.get("created_at") or item.get("createdAt")),
        }
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise InvalidInputError(f"Stored pending item is invalid: {exc.errors()[0]['msg']}") from exc
