"""Todos: one-off or recurring tasks settled through the pending queue."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from chorecoins.domain.activity import CompletionStatus, RepeatType
from chorecoins.store import keys
from chorecoins.store.base import Item
from chorecoins.utils.errors import InvalidInputError
from chorecoins.utils.money import NonNegativeMoney, money_str
from chorecoins.utils.time import parse_iso_datetime


class Todo(BaseModel):
    todo_id: str
    user_id: str
    text: str = Field(..., min_length=1)
    money: NonNegativeMoney
    repeat: RepeatType = RepeatType.ONCE
    completed: CompletionStatus = CompletionStatus.FALSE
    approved_at: datetime | None = None
    last_reset_at: datetime | None = None

    def evolve(self, **changes: Any) -> Todo:
        return Todo.model_validate({**self.model_dump(), **changes})

    def approved(self, now: datetime) -> Todo | None:
        """Apply an approval; ``None`` means a ``once`` todo is removed."""
        if self.repeat is RepeatType.ONCE:
            return None
        return self.evolve(completed=CompletionStatus.TRUE, approved_at=now)

    def reset(self, now: datetime) -> Todo:
        return self.evolve(completed=CompletionStatus.FALSE, last_reset_at=now)

    def pending_reason(self) -> str:
        return f'Completed todo "{self.text}"'

    def to_item(self) -> Item:
        return {
            "partition_key": keys.user_pk(self.user_id),
            "sort_key": keys.todo_sk(self.todo_id),
            "todo_id": self.todo_id,
            "user_id": self.user_id,
            "text": self.text,
            "money": money_str(self.money),
            "repeat": self.repeat.value,
            "completed": self.completed.value,
            "approved_at": self.approved_at.isoformat() if self.approved_at else None,
            "last_reset_at": self.last_reset_at.isoformat() if self.last_reset_at else None,
        }

    @classmethod
    def from_item(cls, item: Item) -> Todo:
        data = {
            "todo_id": item.get("todo_id") or item.get("todoId"),
            "user_id": item.get("user_id") or keys.user_id_from_pk(str(item["partition_key"])),
            "text": item.get("text"),
            "money": item.get("money", 0),
            "repeat": item.get("repeat") or RepeatType.ONCE.value,
            "completed": item.get("completed") or CompletionStatus.FALSE.value,
            "approved_at": parse_iso_datetime(item.get("approved_at") or item.get("approvedAt")),
            "last_reset_at": parse_iso_datetime(item.get("last_reset_at") or item.get("lastResetAt")),
        }
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise InvalidInputError(
                f"Stored todo {data['todo_id']} is invalid: {exc.errors()[0]['msg']}"
            ) from exc
