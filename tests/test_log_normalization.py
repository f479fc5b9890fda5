"""Normalization of stored balance log shapes."""

from __future__ import annotations

from decimal import Decimal

import pytest

from chorecoins.domain.ledger import normalize_logs
from chorecoins.services.ledger_service import LedgerService
from chorecoins.store.memory import MemoryItemStore
from chorecoins.utils.errors import InvalidInputError


def _log(log_id: str, timestamp: str, **fields: object) -> dict:
    return {
        "partition_key": "USER#kid-1",
        "sort_key": f"BALANCELOG#{log_id}",
        "timestamp": timestamp,
        "reason": log_id,
        **fields,
    }


def test_legacy_amount_entries_are_replayed_from_zero() -> None:
    entries = normalize_logs(
        [
            _log("b", "2025-01-02T00:00:00Z", amount="-1.50"),
            _log("a", "2025-01-01T00:00:00Z", amount=5),
        ]
    )

    assert [entry.log_id for entry in entries] == ["a", "b"]
    assert (entries[0].balance_before, entries[0].balance_after) == (Decimal("0.00"), Decimal("5.00"))
    assert (entries[1].balance_before, entries[1].balance_after) == (Decimal("5.00"), Decimal("3.50"))
    assert entries[1].user_id == "kid-1"


def test_mixed_shapes_follow_the_latest_full_entry() -> None:
    """A before/after entry resets the running balance for later legacy ones."""
    entries = normalize_logs(
        [
            _log("a", "2025-01-01T00:00:00Z", amount="2.00"),
            _log("b", "2025-01-02T00:00:00Z", balanceBefore="2.00", balanceAfter="10.00"),
            _log("c", "2025-01-03T00:00:00Z", amount="-4"),
        ]
    )

    assert [entry.balance_after for entry in entries] == [
        Decimal("2.00"),
        Decimal("10.00"),
        Decimal("6.00"),
    ]
    assert entries[2].amount == Decimal("-4.00")


def test_list_logs_reads_legacy_items_newest_first() -> None:
    store = MemoryItemStore()
    store.put(_log("a", "2025-01-01T00:00:00Z", amount="1.00"))
    store.put(_log("b", "2025-01-02T00:00:00Z", amount="2.00"))

    logs = LedgerService(store).list_logs("kid-1")

    assert [entry.log_id for entry in logs] == ["b", "a"]
    assert logs[0].balance_before == Decimal("1.00")
    assert logs[0].balance_after == Decimal("3.00")


def test_log_without_timestamp_is_an_app_error() -> None:
    item = _log("a", "2025-01-01T00:00:00Z", amount=1)
    del item["timestamp"]

    with pytest.raises(InvalidInputError) as excinfo:
        normalize_logs([item])

    assert excinfo.value.status_code == 422
    assert "BALANCELOG#a" in excinfo.value.message
