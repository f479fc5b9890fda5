"""Pending reward storage: proposing, editing and looking up unsettled items."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from chorecoins.domain.pending import PendingReward, PendingType
from chorecoins.store import keys
from chorecoins.store.base import ItemStore
from chorecoins.utils.errors import InvalidInputError, NotFoundError
from chorecoins.utils.money import money_str, to_money
from chorecoins.utils.time import next_stamp, parse_iso_datetime

logger = logging.getLogger(__name__)


def _parse_type(value: Any) -> PendingType:
    try:
        return PendingType(value)
    except ValueError as exc:
        allowed = ", ".join(member.value for member in PendingType)
        raise InvalidInputError(f"Pending type must be one of: {allowed}") from exc


class PendingRewardService:
    """CRUD over a user's pending reward queue.

    Settlement (approve/deny) lives in ``SettlementService``.
    """

    def __init__(self, store: ItemStore) -> None:
        self.store = store

    def list_pending(self, user_id: str) -> list[PendingReward]:
        """Return pending items in creation order."""
        items = self.store.query(keys.user_pk(user_id), keys.PENDING_PREFIX)
        return [PendingReward.from_item(item) for item in items]

    def get(self, user_id: str, pending_id: str) -> PendingReward:
        item = self.store.get(keys.user_pk(user_id), keys.pending_sk(pending_id))
        if item is None:
            raise NotFoundError("Pending reward")
        return PendingReward.from_item(item)

    def propose(
        self,
        user_id: str,
        amount: Any,
        reason: str,
        pending_type: Any = PendingType.ADJUSTMENT,
        reference_id: str | None = None,
    ) -> PendingReward:
        """Insert a new pending item; the balance is not touched."""
        pending_id, created_at = next_stamp()
        try:
            pending = PendingReward(
                pending_id=pending_id,
                user_id=user_id,
                amount=to_money(amount),
                reason=reason or "",
                type=_parse_type(pending_type),
                reference_id=reference_id or None,
                created_at=parse_iso_datetime(created_at),
            )
        except ValidationError as exc:
            raise InvalidInputError(exc.errors()[0]["msg"]) from exc

        self.store.put(pending.to_item(), if_not_exists=True)
        logger.info(
            "Proposed %s pending %s for %s: %s (%s)",
            pending.type.value,
            pending.pending_id,
            user_id,
            pending.amount,
            pending.reason,
        )
        return pending

    def update(
        self,
        user_id: str,
        pending_id: str,
        amount: Any = None,
        reason: str | None = None,
    ) -> PendingReward:
        """Edit amount and/or reason of an existing item in place."""
        changes: dict[str, Any] = {}
        if amount is not None:
            changes["amount"] = money_str(to_money(amount))
        if reason is not None:
            if not reason.strip():
                raise InvalidInputError("Reason is required")
            changes["reason"] = reason.strip()
        if not changes:
            return self.get(user_id, pending_id)

        item = self.store.update(keys.user_pk(user_id), keys.pending_sk(pending_id), changes)
        return PendingReward.from_item(item)

    def delete(self, user_id: str, pending_id: str) -> None:
        self.store.delete(keys.user_pk(user_id), keys.pending_sk(pending_id))

    def find_for_reference(
        self,
        user_id: str,
        pending_type: PendingType,
        reference_id: str,
    ) -> list[PendingReward]:
        return [
            pending
            for pending in self.list_pending(user_id)
            if pending.refers_to(pending_type, reference_id)
        ]

    def sync_for_reference(
        self,
        user_id: str,
        pending_type: PendingType,
        reference_id: str,
        amount: Any,
        reason: str,
    ) -> PendingReward | None:
        """Converge on exactly one pending item for ``(pending_type, reference_id)``.

        ``amount=None`` removes every item for the reference. Otherwise the
        oldest existing item is updated in place, any duplicates are removed,
        and a new item is created only when none exists.
        """
        existing = self.find_for_reference(user_id, pending_type, reference_id)
        if amount is None:
            for pending in existing:
                self.delete(user_id, pending.pending_id)
            return None

        if not existing:
            return self.propose(user_id, amount, reason, pending_type, reference_id)

        keep, duplicates = existing[0], existing[1:]
        for pending in duplicates:
            logger.warning(
                "Removing duplicate pending %s for %s %s", pending.pending_id, pending_type.value, reference_id
            )
            self.delete(user_id, pending.pending_id)
        return self.update(user_id, keep.pending_id, amount=amount, reason=reason)
