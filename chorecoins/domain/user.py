"""User account record and reset settings."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from chorecoins.store import keys
from chorecoins.store.base import Item
from chorecoins.utils.money import NonNegativeMoney, money_str, to_money
from chorecoins.utils.time import parse_iso_datetime

_TRUE_FLAGS = frozenset({"true", "1", "yes", "on"})


def _parse_flag(value: Any) -> bool:
    """Read a stored boolean that may have been written as text or a number."""
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_FLAGS
    if isinstance(value, (bool, int)):
        return bool(value)
    return False


class UserSettings(BaseModel):
    """Per-user daily reset configuration."""

    complete_award: NonNegativeMoney = Field(default=0)
    uncomplete_fine: NonNegativeMoney = Field(default=0)
    auto_reset: bool = False


class UserAccount(BaseModel):
    user_id: str
    username: str
    settings: UserSettings = Field(default_factory=UserSettings)
    created_at: datetime | None = None

    def to_item(self) -> Item:
        return {
            "partition_key": keys.user_pk(self.user_id),
            "sort_key": keys.METADATA,
            "user_id": self.user_id,
            "username": self.username,
            "complete_award": money_str(self.settings.complete_award),
            "uncomplete_fine": money_str(self.settings.uncomplete_fine),
            "auto_reset": self.settings.auto_reset,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_item(cls, item: Item) -> UserAccount:
        user_id = str(item.get("user_id") or keys.user_id_from_pk(str(item["partition_key"])))
        return cls(
            user_id=user_id,
            username=str(item.get("username") or user_id),
            settings=UserSettings(
                complete_award=to_money(item.get("complete_award", item.get("completeAward"))),
                uncomplete_fine=to_money(item.get("uncomplete_fine", item.get("uncompleteFine"))),
                auto_reset=_parse_flag(item.get("auto_reset", item.get("autoReset"))),
            ),
            created_at=parse_iso_datetime(item.get("created_at")),
        )
