"""Entertainment catalog and purchase tests."""

from __future__ import annotations

from decimal import Decimal

import pytest

from chorecoins.domain.pending import PendingType
from chorecoins.services.entertainment_service import EntertainmentService
from chorecoins.services.ledger_service import LedgerService
from chorecoins.services.pending_service import PendingRewardService
from chorecoins.utils.errors import InsufficientCoinsError, InvalidInputError, NotFoundError


def test_defaults_are_seeded_once(store, user_id: str) -> None:
    service = EntertainmentService(store)
    first = service.list_entertainments(user_id)
    second = service.list_entertainments(user_id)

    assert {item.entertainment_id for item in first} == {"iphone", "ipad", "gaming", "tv"}
    assert len(second) == 4
    assert all(item.minutes_per_coin == 5 for item in second)


def test_purchase_proposes_negative_adjustment(
    store, pending: PendingRewardService, ledger: LedgerService, user_id: str
) -> None:
    service = EntertainmentService(store)
    service.list_entertainments(user_id)
    service.update(user_id, "tv", cost_per_coin="0.50")

    result = service.purchase(user_id, "tv", 3)

    assert result.total_minutes == 15
    assert result.total_cost == Decimal("1.50")
    item = pending.get(user_id, result.pending_id)
    assert item.type is PendingType.ADJUSTMENT
    assert item.amount == Decimal("-1.50")
    assert item.reason == "Purchased 15 minutes of TV Time for 3 coins"
    assert ledger.get_balance(user_id) == Decimal("0.00")


def test_purchase_refused_below_spend_floor(store, ledger: LedgerService, user_id: str) -> None:
    service = EntertainmentService(store)
    service.list_entertainments(user_id)
    ledger.set_balance(user_id, "-5.01", "Owes a lot")

    with pytest.raises(InsufficientCoinsError):
        service.purchase(user_id, "ipad", 1)


def test_hidden_or_unknown_entertainment(store, user_id: str) -> None:
    service = EntertainmentService(store)
    service.list_entertainments(user_id)
    service.update(user_id, "gaming", visible=False)

    with pytest.raises(NotFoundError):
        service.purchase(user_id, "gaming", 1)
    with pytest.raises(NotFoundError):
        service.purchase(user_id, "boardgames", 1)
    with pytest.raises(InvalidInputError):
        service.update(user_id, "tv", price=3)
