"""Approval and denial of pending rewards.

Approving an item runs the source-specific handler (activity or todo), writes
the amount through the ledger and deletes the item. Denying only resets the
source activity and deletes the item; it never touches the balance.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection

from chorecoins.domain.ledger import BalanceChange
from chorecoins.domain.pending import PendingReward, PendingType
from chorecoins.domain.results import BatchResult
from chorecoins.services.activity_service import ActivityService
from chorecoins.services.ledger_service import LedgerService, user_lock
from chorecoins.services.pending_service import PendingRewardService
from chorecoins.services.todo_service import TodoService
from chorecoins.store.base import ItemStore
from chorecoins.utils.errors import AppError, NotFoundError
from chorecoins.utils.money import format_money

logger = logging.getLogger(__name__)

APPROVED_PREFIX = "Approved: "


class SettlementService:
    """Settle pending rewards against the ledger."""

    def __init__(self, store: ItemStore) -> None:
        self.pending = PendingRewardService(store)
        self.ledger = LedgerService(store)
        self.activities = ActivityService(store)
        self.todos = TodoService(store)

    def _settle_reference(self, pending: PendingReward) -> None:
        if not pending.reference_id:
            return
        try:
            if pending.type is PendingType.ACTIVITY:
                self.activities.approve_activity(pending.user_id, pending.reference_id)
            elif pending.type is PendingType.TODO:
                self.todos.approve_todo(pending.user_id, pending.reference_id)
        except NotFoundError:
            logger.warning(
                "%s %s referenced by pending %s no longer exists",
                pending.type.value,
                pending.reference_id,
                pending.pending_id,
            )

    def approve_one(self, user_id: str, pending_id: str, *, reason_prefix: str = "") -> BalanceChange:
        """Settle one pending item; ``BalanceChange.amount`` is the settled amount."""
        with user_lock(user_id):
            pending = self.pending.get(user_id, pending_id)
            self._settle_reference(pending)
            change = self.ledger.apply_delta(user_id, pending.amount, f"{reason_prefix}{pending.reason}")
            self.pending.delete(user_id, pending_id)
        logger.info(
            "Approved pending %s for %s: %s (%s)",
            pending_id,
            user_id,
            format_money(pending.amount),
            pending.reason,
        )
        return change

    def deny_one(self, user_id: str, pending_id: str) -> PendingReward:
        """Discard one pending item, resetting its activity when it has one."""
        with user_lock(user_id):
            pending = self.pending.get(user_id, pending_id)
            if pending.type is PendingType.ACTIVITY and pending.reference_id:
                try:
                    self.activities.deny_activity(user_id, pending.reference_id)
                except NotFoundError:
                    logger.warning(
                        "Activity %s referenced by pending %s no longer exists",
                        pending.reference_id,
                        pending_id,
                    )
            self.pending.delete(user_id, pending_id)
        logger.info("Denied pending %s for %s (%s)", pending_id, user_id, pending.reason)
        return pending

    def _approve_each(
        self,
        user_id: str,
        predicate: Callable[[PendingReward], bool],
        reason_prefix: str,
    ) -> BatchResult:
        result = BatchResult()
        for pending in self.pending.list_pending(user_id):
            if not predicate(pending):
                continue
            try:
                change = self.approve_one(user_id, pending.pending_id, reason_prefix=reason_prefix)
            except AppError:
                logger.exception("Failed to approve pending %s for %s", pending.pending_id, user_id)
                result.failed += 1
                continue
            result.processed += 1
            result.total_amount += change.amount
        result.balance = self.ledger.get_balance(user_id)
        return result

    def approve_all(self, user_id: str) -> BatchResult:
        """Approve every pending item in creation order.

        Items are applied one after another, so each log entry's before/after
        values include the items approved earlier in the same batch.
        """
        result = self._approve_each(user_id, lambda _: True, "")
        logger.info(
            "Approved %s pending items for %s totaling %s (%s failed)",
            result.processed,
            user_id,
            format_money(result.total_amount),
            result.failed,
        )
        return result

    def approve_for_activities(
        self,
        user_id: str,
        activity_ids: Collection[str],
        reason_prefix: str = APPROVED_PREFIX,
    ) -> BatchResult:
        """Approve only activity-type items that reference ``activity_ids``."""
        wanted = set(activity_ids)
        return self._approve_each(
            user_id,
            lambda pending: pending.type is PendingType.ACTIVITY and pending.reference_id in wanted,
            reason_prefix,
        )

    def deny_all(self, user_id: str) -> BatchResult:
        result = BatchResult()
        for pending in self.pending.list_pending(user_id):
            try:
                self.deny_one(user_id, pending.pending_id)
            except AppError:
                logger.exception("Failed to deny pending %s for %s", pending.pending_id, user_id)
                result.failed += 1
                continue
            result.processed += 1
            result.total_amount += pending.amount
        result.balance = self.ledger.get_balance(user_id)
        logger.info("Denied %s pending items for %s (%s failed)", result.processed, user_id, result.failed)
        return result
