"""Screen-time entertainment catalog entries that coins are spent on."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field

from chorecoins.store import keys
from chorecoins.store.base import Item
from chorecoins.utils.money import NonNegativeMoney, money_str

DEFAULT_ENTERTAINMENTS: tuple[dict[str, str], ...] = (
    {"entertainment_id": "iphone", "name": "iPhone Time"},
    {"entertainment_id": "ipad", "name": "iPad Time"},
    {"entertainment_id": "gaming", "name": "Gaming Time"},
    {"entertainment_id": "tv", "name": "TV Time"},
)
DEFAULT_MINUTES_PER_COIN = 5
DEFAULT_COST_PER_COIN = Decimal("1.00")


class Entertainment(BaseModel):
    entertainment_id: str
    user_id: str
    name: str = Field(..., min_length=1)
    image: str | None = None
    minutes_per_coin: int = Field(default=DEFAULT_MINUTES_PER_COIN, gt=0)
    cost_per_coin: NonNegativeMoney = DEFAULT_COST_PER_COIN
    visible: bool = True
    description: str = ""

    def to_item(self) -> Item:
        return {
            "partition_key": keys.user_pk(self.user_id),
            "sort_key": keys.entertainment_sk(self.entertainment_id),
            "entertainment_id": self.entertainment_id,
            "user_id": self.user_id,
            "name": self.name,
            "image": self.image,
            "minutes_per_coin": self.minutes_per_coin,
            "cost_per_coin": money_str(self.cost_per_coin),
            "visible": self.visible,
            "description": self.description,
        }

    @classmethod
    def from_item(cls, item: Item) -> Entertainment:
        return cls(
            entertainment_id=str(item.get("entertainment_id") or item.get("entertainmentId")),
            user_id=str(item.get("user_id") or keys.user_id_from_pk(str(item["partition_key"]))),
            name=str(item.get("name") or "Entertainment"),
            image=item.get("image"),
            minutes_per_coin=int(
                item.get("minutes_per_coin") or item.get("minutesPerCoin") or DEFAULT_MINUTES_PER_COIN
            ),
            cost_per_coin=item.get("cost_per_coin", item.get("costPerCoin", DEFAULT_COST_PER_COIN)),
            visible=bool(item.get("visible", True)),
            description=str(item.get("description") or ""),
        )

    @classmethod
    def default_for(cls, user_id: str, entertainment_id: str, name: str) -> Entertainment:
        label = name.removesuffix(" Time")
        return cls(
            entertainment_id=entertainment_id,
            user_id=user_id,
            name=name,
            description=f"Each coin adds {DEFAULT_MINUTES_PER_COIN} minutes of {label} time.",
        )
