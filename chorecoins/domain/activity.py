"""Activities and their completion state machine.

An activity is always in exactly one of these states:

* ``IDLE``: ``pending_quantity == 0`` and ``completed == "false"``
* ``AWAITING_APPROVAL``: ``pending_quantity > 0`` and ``completed == "pending"``
* ``SETTLED``: ``completed == "true"`` and ``pending_quantity == 0``

Approving a ``once`` activity removes it, which is represented by
:meth:`Activity.approved` returning ``None``. Any other flag combination is
rejected when the model is built.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, ValidationError, model_validator

from chorecoins.store import keys
from chorecoins.store.base import Item
from chorecoins.utils.errors import InvalidInputError
from chorecoins.utils.money import NonNegativeMoney, money_str
from chorecoins.utils.time import parse_iso_datetime


class RepeatType(str, Enum):
    """Cadence controlling resets and one-shot deletion."""

    NONE = "none"
    ONCE = "once"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @property
    def is_scheduled(self) -> bool:
        return self in (RepeatType.DAILY, RepeatType.WEEKLY, RepeatType.MONTHLY)


class CompletionStatus(str, Enum):
    FALSE = "false"
    PENDING = "pending"
    TRUE = "true"


class ActivityState(str, Enum):
    IDLE = "idle"
    AWAITING_APPROVAL = "awaiting_approval"
    SETTLED = "settled"


class Activity(BaseModel):
    """A behavior-grouped or standalone activity that earns or loses coins."""

    activity_id: str
    user_id: str
    name: str = Field(..., min_length=1)
    money: NonNegativeMoney
    positive: bool = True
    top: bool = False
    repeat: RepeatType = RepeatType.NONE
    completed: CompletionStatus = CompletionStatus.FALSE
    pending_quantity: int = Field(default=0, ge=0)
    behavior_id: str | None = None
    last_reset_at: datetime | None = None

    @model_validator(mode="after")
    def _check_state(self) -> Activity:
        if self.completed is CompletionStatus.PENDING and self.pending_quantity == 0:
            raise ValueError("completed='pending' requires a pending quantity")
        if self.completed is not CompletionStatus.PENDING and self.pending_quantity > 0:
            raise ValueError(
                f"completed='{self.completed.value}' is invalid with "
                f"pending_quantity={self.pending_quantity}"
            )
        return self

    @property
    def state(self) -> ActivityState:
        if self.completed is CompletionStatus.PENDING:
            return ActivityState.AWAITING_APPROVAL
        if self.completed is CompletionStatus.TRUE:
            return ActivityState.SETTLED
        return ActivityState.IDLE

    @property
    def sort_key(self) -> str:
        return keys.activity_sk(self.activity_id, self.behavior_id)

    @property
    def sign(self) -> int:
        return 1 if self.positive else -1

    def evolve(self, **changes: Any) -> Activity:
        """Return a validated copy with ``changes`` applied."""
        return Activity.model_validate({**self.model_dump(), **changes})

    def with_pending_quantity(self, quantity: int) -> Activity:
        quantity = max(0, quantity)
        status = CompletionStatus.PENDING if quantity > 0 else CompletionStatus.FALSE
        return self.evolve(pending_quantity=quantity, completed=status)

    def approved(self) -> Activity | None:
        """Apply an approval; ``None`` means the activity is removed."""
        if self.repeat is RepeatType.ONCE:
            return None
        if self.repeat.is_scheduled:
            return self.evolve(pending_quantity=0, completed=CompletionStatus.TRUE)
        return self.evolve(pending_quantity=0, completed=CompletionStatus.FALSE)

    def denied(self) -> Activity:
        return self.evolve(pending_quantity=0, completed=CompletionStatus.FALSE)

    def reset(self, now: datetime) -> Activity:
        return self.evolve(pending_quantity=0, completed=CompletionStatus.FALSE, last_reset_at=now)

    def pending_amount(self) -> Decimal:
        return self.money * self.pending_quantity * self.sign

    def pending_reason(self) -> str:
        verb = "Completed" if self.positive else "Did"
        times = "time" if self.pending_quantity == 1 else "times"
        return f'{verb} "{self.name}" ({self.pending_quantity} {times})'

    def to_item(self) -> Item:
        return {
            "partition_key": keys.user_pk(self.user_id),
            "sort_key": self.sort_key,
            "activity_id": self.activity_id,
            "user_id": self.user_id,
            "name": self.name,
            "money": money_str(self.money),
            "positive": self.positive,
            "top": self.top,
            "repeat": self.repeat.value,
            "completed": self.completed.value,
            "pending_quantity": self.pending_quantity,
            "behavior_id": self.behavior_id,
            "last_reset_at": self.last_reset_at.isoformat() if self.last_reset_at else None,
        }

    @classmethod
    def from_item(cls, item: Item) -> Activity:
        data = {
            "activity_id": item.get("activity_id") or item.get("activityId"),
            "user_id": item.get("user_id") or keys.user_id_from_pk(str(item["partition_key"])),
            "name": item.get("name") or item.get("activityName"),
            "money": item.get("money", 0),
            "positive": item.get("positive", True),
            "top": item.get("top") or False,
            "repeat": item.get("repeat") or RepeatType.NONE.value,
            "completed": item.get("completed") or CompletionStatus.FALSE.value,
            "pending_quantity": item.get("pending_quantity") or 0,
            "behavior_id": item.get("behavior_id") or item.get("behaviorId"),
            "last_reset_at": parse_iso_datetime(item.get("last_reset_at") or item.get("lastResetAt")),
        }
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise InvalidInputError(
                f"Stored activity {data['activity_id']} is invalid: {exc.errors()[0]['msg']}"
            ) from exc
