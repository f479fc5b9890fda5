"""Balance ledger: the only code that writes a user's coin balance.

Every balance write is paired with exactly one appended log entry. Writes for
one user are serialized by a per-user lock inside the process, and the
balance record carries a ``version`` so that writers in other processes fail
with ``ConflictError`` instead of silently losing an update.
"""

from __future__ import annotations

import logging
import threading
import weakref
from decimal import Decimal
from typing import Any

from chorecoins.config import settings
from chorecoins.domain.ledger import BalanceChange, BalanceLogEntry, normalize_logs
from chorecoins.domain.results import BackupResult, PurgeResult
from chorecoins.store import keys
from chorecoins.store.base import ItemStore
from chorecoins.utils.errors import AppError, ConflictError, InvalidInputError, NotFoundError, StoreError
from chorecoins.utils.money import ZERO, format_money, money_str, to_money
from chorecoins.utils.time import next_stamp, parse_iso_datetime

logger = logging.getLogger(__name__)

_user_locks: weakref.WeakValueDictionary[str, threading.RLock] = weakref.WeakValueDictionary()
_locks_guard = threading.Lock()


def user_lock(user_id: str) -> threading.RLock:
    """Return the re-entrant lock serializing ledger work for ``user_id``.

    Locks are held weakly and dropped once no caller references them.
    """
    with _locks_guard:
        lock = _user_locks.get(user_id)
        if lock is None:
            lock = threading.RLock()
            _user_locks[user_id] = lock
        return lock


class LedgerService:
    """Read and write balances and the append-only balance log."""

    def __init__(self, store: ItemStore) -> None:
        self.store = store

    def _read_balance(self, user_id: str) -> tuple[Decimal, int, bool]:
        """Return ``(balance, version, exists)``.

        A record written without a ``version`` reads as version 0 but still
        exists, so the next write must update it rather than create it.
        """
        item = self.store.get(keys.user_pk(user_id), keys.BALANCE)
        if item is None:
            return ZERO, 0, False
        return to_money(item.get("balance")), int(item.get("version") or 0), True

    def get_balance(self, user_id: str) -> Decimal:
        """Return the stored balance, defaulting to zero."""
        balance, _, _ = self._read_balance(user_id)
        return balance

    def _write_balance(
        self, user_id: str, new_balance: Decimal, version: int, exists: bool
    ) -> None:
        changes: dict[str, Any] = {"balance": money_str(new_balance), "version": version + 1}
        if not exists:
            self.store.put(
                {
                    "partition_key": keys.user_pk(user_id),
                    "sort_key": keys.BALANCE,
                    "user_id": user_id,
                    **changes,
                },
                if_not_exists=True,
            )
            return
        self.store.update(
            keys.user_pk(user_id),
            keys.BALANCE,
            changes,
            expected={"version": version or None},
        )

    def set_balance(
        self,
        user_id: str,
        new_balance: Any,
        reason: str,
        *,
        expected_version: int | None = None,
    ) -> BalanceChange:
        """Overwrite the balance and append one log entry describing the change.

        ``expected_version`` makes the write fail with ``ConflictError`` when
        the stored version moved since the caller read it.
        """
        target = to_money(new_balance)
        reason = (reason or "").strip()
        if not reason:
            raise InvalidInputError("Reason is required")

        with user_lock(user_id):
            before, version, exists = self._read_balance(user_id)
            if expected_version is not None and expected_version != version:
                raise ConflictError(
                    f"Balance for {user_id} changed (version {version}, expected {expected_version})",
                    code="BALANCE_CONFLICT",
                )
            self._write_balance(user_id, target, version, exists)

            log_id, timestamp = next_stamp()
            entry = BalanceLogEntry(
                log_id=log_id,
                user_id=user_id,
                balance_before=before,
                balance_after=target,
                reason=reason,
                timestamp=parse_iso_datetime(timestamp),
            )
            try:
                self.store.put(entry.to_item(), if_not_exists=True)
            except AppError as exc:
                logger.error(
                    "Balance for %s moved %s -> %s but the log entry was not written: %s",
                    user_id,
                    before,
                    target,
                    exc.message,
                )
                raise StoreError(
                    "Balance updated but the log entry could not be written",
                    details=exc.message,
                ) from exc

        logger.info("Balance for %s: %s -> %s (%s)", user_id, before, target, reason)
        return BalanceChange(balance_before=before, balance_after=target, log_id=log_id)

    def apply_delta(self, user_id: str, delta: Any, reason: str) -> BalanceChange:
        """Add ``delta`` to the current balance through :meth:`set_balance`.

        Version conflicts are retried ``BALANCE_WRITE_RETRIES`` times.
        """
        amount = to_money(delta)
        attempts = max(1, settings.balance_write_retries)
        for attempt in range(1, attempts + 1):
            with user_lock(user_id):
                before, version, _ = self._read_balance(user_id)
                try:
                    return self.set_balance(
                        user_id, before + amount, reason, expected_version=version
                    )
                except ConflictError:
                    if attempt == attempts:
                        raise
                    logger.warning(
                        "Balance version conflict for %s (attempt %s/%s), retrying",
                        user_id,
                        attempt,
                        attempts,
                    )
        raise ConflictError(f"Balance for {user_id} could not be updated")

    def list_logs(self, user_id: str) -> list[BalanceLogEntry]:
        """Return the normalized log history, newest first."""
        items = self.store.query(keys.user_pk(user_id), keys.LOG_PREFIX)
        return list(reversed(normalize_logs(items)))

    def purge_logs(self, user_id: str) -> PurgeResult:
        """Delete every log entry of a user; the balance is left untouched."""
        items = self.store.query(keys.user_pk(user_id), keys.LOG_PREFIX)
        deleted = 0
        errors = 0
        for item in items:
            try:
                self.store.delete(item["partition_key"], item["sort_key"])
                deleted += 1
            except AppError:
                logger.exception("Failed to delete log %s for %s", item["sort_key"], user_id)
                errors += 1
        logger.info("Purged %s logs for %s (%s errors)", deleted, user_id, errors)
        return PurgeResult(total_found=len(items), deleted_count=deleted, error_count=errors)

    def backup_to(self, user_id: str, log_id: str, target_balance: Any) -> BackupResult:
        """Restore the balance to ``target_balance`` and drop logs after ``log_id``.

        Logs up to and including the target stay; one new entry records the
        restore itself.
        """
        target = to_money(target_balance)
        partition_key = keys.user_pk(user_id)

        with user_lock(user_id):
            entries = normalize_logs(self.store.query(partition_key, keys.LOG_PREFIX))
            index = next(
                (position for position, entry in enumerate(entries) if entry.log_id == log_id),
                None,
            )
            if index is None:
                raise NotFoundError("Target log")

            later = entries[index + 1 :]
            deleted = 0
            errors = 0
            for entry in later:
                try:
                    self.store.delete(partition_key, keys.log_sk(entry.log_id))
                    deleted += 1
                except AppError:
                    logger.exception("Failed to delete log %s for %s", entry.log_id, user_id)
                    errors += 1

            change = self.set_balance(
                user_id,
                target,
                f"Backup operation: Restored balance to {format_money(target)} "
                f"and removed {deleted} logs",
            )

        logger.info(
            "Backup for %s to log %s: removed %s logs, balance %s -> %s, %s errors",
            user_id,
            log_id,
            deleted,
            change.balance_before,
            change.balance_after,
            errors,
        )
        return BackupResult(
            target_log_id=log_id,
            deleted_count=deleted,
            error_count=errors,
            balance_before=change.balance_before,
            balance_after=change.balance_after,
            log_id=change.log_id,
        )
