"""Behaviors group related activities."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from chorecoins.store import keys
from chorecoins.store.base import Item
from chorecoins.utils.time import parse_iso_datetime


class Behavior(BaseModel):
    behavior_id: str
    user_id: str
    name: str = Field(..., min_length=1)
    created_at: datetime | None = None

    def to_item(self) -> Item:
        return {
            "partition_key": keys.user_pk(self.user_id),
            "sort_key": keys.behavior_sk(self.behavior_id),
            "behavior_id": self.behavior_id,
            "user_id": self.user_id,
            "name": self.name,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_item(cls, item: Item) -> Behavior:
        return cls(
            behavior_id=str(item.get("behavior_id") or item.get("behaviorId")),
            user_id=str(item.get("user_id") or keys.user_id_from_pk(str(item["partition_key"]))),
            name=str(item.get("name") or item.get("behaviorName") or "Untitled"),
            created_at=parse_iso_datetime(item.get("created_at")),
        )
