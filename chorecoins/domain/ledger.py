"""Balance log entries and their normalization at the read boundary."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel

from chorecoins.store import keys
from chorecoins.store.base import Item
from chorecoins.utils.errors import InvalidInputError
from chorecoins.utils.money import ZERO, Money, money_str, to_money
from chorecoins.utils.time import parse_iso_datetime


class BalanceLogEntry(BaseModel):
    """One append-only balance change, always in ``before/after`` form."""

    log_id: str
    user_id: str
    balance_before: Money
    balance_after: Money
    reason: str
    timestamp: datetime

    @property
    def amount(self) -> Decimal:
        return self.balance_after - self.balance_before

    def to_item(self) -> Item:
        return {
            "partition_key": keys.user_pk(self.user_id),
            "sort_key": keys.log_sk(self.log_id),
            "log_id": self.log_id,
            "user_id": self.user_id,
            "amount": money_str(self.amount),
            "balance_before": money_str(self.balance_before),
            "balance_after": money_str(self.balance_after),
            "reason": self.reason,
            "timestamp": self.timestamp.isoformat(),
        }


class BalanceChange(BaseModel):
    """Result of a single ledger write."""

    balance_before: Money
    balance_after: Money
    log_id: str

    @property
    def amount(self) -> Decimal:
        return self.balance_after - self.balance_before


def _first(raw: dict[str, Any], *names: str) -> Any:
    for name in names:
        if raw.get(name) is not None:
            return raw[name]
    return None


def _log_sort_key(raw: dict[str, Any]) -> tuple[datetime, str]:
    timestamp = parse_iso_datetime(_first(raw, "timestamp"))
    if timestamp is None:
        raise InvalidInputError(f"Balance log {raw.get('sort_key')} has no timestamp")
    log_id = str(_first(raw, "log_id", "logId") or raw.get("sort_key", ""))
    return timestamp, log_id


def normalize_logs(items: Iterable[Item]) -> list[BalanceLogEntry]:
    """Return log items as ``BalanceLogEntry`` objects in chronological order.

    Two stored shapes are accepted: entries carrying ``balance_before`` and
    ``balance_after`` (snake or camel case), and legacy entries carrying only a
    signed ``amount``. Legacy entries get their before/after values by replaying
    the history from zero; a full entry resets the running balance.
    """
    ordered = sorted(items, key=_log_sort_key)
    running = ZERO
    entries: list[BalanceLogEntry] = []
    for raw in ordered:
        before_raw = _first(raw, "balance_before", "balanceBefore")
        after_raw = _first(raw, "balance_after", "balanceAfter")
        if after_raw is not None:
            before = to_money(before_raw) if before_raw is not None else running
            after = to_money(after_raw)
        else:
            before = running
            after = running + to_money(_first(raw, "amount"))

        timestamp, log_id = _log_sort_key(raw)
        partition_key = str(raw.get("partition_key", ""))
        entries.append(
            BalanceLogEntry(
                log_id=log_id.removeprefix(keys.LOG_PREFIX),
                user_id=str(
                    _first(raw, "user_id", "userId") or keys.user_id_from_pk(partition_key)
                ),
                balance_before=before,
                balance_after=after,
                reason=str(raw.get("reason") or ""),
                timestamp=timestamp,
            )
        )
        running = after
    return entries
