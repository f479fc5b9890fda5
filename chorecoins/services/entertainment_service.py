"""Entertainment catalog and coin spending requests."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from chorecoins.config import settings
from chorecoins.domain.entertainment import DEFAULT_ENTERTAINMENTS, Entertainment
from chorecoins.domain.pending import PendingType
from chorecoins.domain.results import PurchaseResult
from chorecoins.services.ledger_service import LedgerService
from chorecoins.services.pending_service import PendingRewardService
from chorecoins.store import keys
from chorecoins.store.base import ItemStore
from chorecoins.utils.errors import InsufficientCoinsError, InvalidInputError, NotFoundError
from chorecoins.utils.money import format_money

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = {"name", "image", "minutes_per_coin", "cost_per_coin", "visible", "description"}


class EntertainmentService:
    """Per-user entertainment options; purchases go through the pending queue."""

    def __init__(self, store: ItemStore) -> None:
        self.store = store
        self.ledger = LedgerService(store)
        self.pending = PendingRewardService(store)

    def list_entertainments(self, user_id: str) -> list[Entertainment]:
        """Return the catalog, seeding the defaults on first use."""
        items = self.store.query(keys.user_pk(user_id), keys.ENTERTAINMENT_PREFIX)
        if items:
            return [Entertainment.from_item(item) for item in items]

        defaults = [
            Entertainment.default_for(user_id, entry["entertainment_id"], entry["name"])
            for entry in DEFAULT_ENTERTAINMENTS
        ]
        for entertainment in defaults:
            self.store.put(entertainment.to_item())
        logger.info("Created default entertainments for %s", user_id)
        return defaults

    def get(self, user_id: str, entertainment_id: str) -> Entertainment:
        item = self.store.get(keys.user_pk(user_id), keys.entertainment_sk(entertainment_id))
        if item is None:
            raise NotFoundError("Entertainment")
        return Entertainment.from_item(item)

    def update(self, user_id: str, entertainment_id: str, **changes: Any) -> Entertainment:
        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise InvalidInputError(f"Cannot update fields: {', '.join(sorted(unknown))}")
        current = self.get(user_id, entertainment_id)
        try:
            updated = Entertainment.model_validate({**current.model_dump(), **changes})
        except ValidationError as exc:
            raise InvalidInputError(exc.errors()[0]["msg"]) from exc
        self.store.put(updated.to_item())
        return updated

    def purchase(self, user_id: str, entertainment_id: str, coins: int) -> PurchaseResult:
        """Request screen time; the cost is proposed as a negative adjustment."""
        if coins < 1:
            raise InvalidInputError("Coins must be at least 1")
        entertainment = self.get(user_id, entertainment_id)
        if not entertainment.visible:
            raise NotFoundError("Entertainment")

        balance = self.ledger.get_balance(user_id)
        if balance < settings.spend_floor:
            raise InsufficientCoinsError(format_money(balance), format_money(settings.spend_floor))

        total_minutes = coins * entertainment.minutes_per_coin
        total_cost = entertainment.cost_per_coin * coins
        pending = self.pending.propose(
            user_id,
            -total_cost,
            f"Purchased {total_minutes} minutes of {entertainment.name} for {coins} coins",
            PendingType.ADJUSTMENT,
        )
        return PurchaseResult(
            pending_id=pending.pending_id,
            total_minutes=total_minutes,
            total_cost=total_cost,
            message=(
                f"Requested {total_minutes} minutes of {entertainment.name} for "
                f"{format_money(total_cost)}. Awaiting approval."
            ),
        )
