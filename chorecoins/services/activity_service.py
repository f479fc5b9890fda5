"""Activity records and the completion/pending-quantity state machine."""

from __future__ import annotations

import logging
import uuid
from typing import Any

from pydantic import ValidationError

from chorecoins.domain.activity import Activity, RepeatType
from chorecoins.domain.pending import PendingType
from chorecoins.services.ledger_service import user_lock
from chorecoins.services.pending_service import PendingRewardService
from chorecoins.store import keys
from chorecoins.store.base import ItemStore
from chorecoins.utils.errors import InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = {"name", "money", "positive", "top", "repeat", "behavior_id"}


class ActivityService:
    """Create, read and transition activities for one item store."""

    def __init__(self, store: ItemStore) -> None:
        self.store = store
        self.pending = PendingRewardService(store)

    def list_activities(
        self,
        user_id: str,
        behavior_id: str | None = None,
        standalone: bool | None = None,
    ) -> list[Activity]:
        """Return activities, optionally only one behavior's or only standalone ones."""
        partition_key = keys.user_pk(user_id)
        if behavior_id:
            items = self.store.query(partition_key, keys.grouped_activity_prefix(behavior_id))
        else:
            items = []
            if standalone is not False:
                items.extend(self.store.query(partition_key, keys.ACTIVITY_PREFIX))
            if not standalone:
                items.extend(
                    item
                    for item in self.store.query(partition_key, keys.BEHAVIOR_PREFIX)
                    if keys.is_activity_sk(item["sort_key"])
                )
        return [Activity.from_item(item) for item in items]

    def list_repeating(self, user_id: str) -> list[Activity]:
        """Return grouped and standalone activities whose repeat is not ``none``."""
        return [
            activity
            for activity in self.list_activities(user_id)
            if activity.repeat is not RepeatType.NONE
        ]

    def get(self, user_id: str, activity_id: str) -> Activity:
        for activity in self.list_activities(user_id):
            if activity.activity_id == activity_id:
                return activity
        raise NotFoundError("Activity")

    def _save(self, activity: Activity) -> None:
        self.store.put(activity.to_item())

    def _ensure_behavior(self, user_id: str, behavior_id: str) -> None:
        if self.store.get(keys.user_pk(user_id), keys.behavior_sk(behavior_id)) is None:
            raise NotFoundError("Behavior")

    def create(
        self,
        user_id: str,
        name: str,
        money: Any,
        positive: bool = True,
        repeat: Any = RepeatType.NONE,
        behavior_id: str | None = None,
        top: bool = False,
    ) -> Activity:
        behavior_id = (behavior_id or "").strip() or None
        if behavior_id:
            self._ensure_behavior(user_id, behavior_id)
        try:
            activity = Activity(
                activity_id=str(uuid.uuid4()),
                user_id=user_id,
                name=(name or "").strip(),
                money=money,
                positive=positive,
                top=top,
                repeat=repeat,
                behavior_id=behavior_id,
            )
        except ValidationError as exc:
            raise InvalidInputError(exc.errors()[0]["msg"]) from exc

        self.store.put(activity.to_item(), if_not_exists=True)
        logger.info("Created activity %s (%s) for %s", activity.activity_id, activity.name, user_id)
        return activity

    def update(self, user_id: str, activity_id: str, **changes: Any) -> Activity:
        """Edit descriptive fields; moving between behaviors re-keys the record."""
        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise InvalidInputError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        with user_lock(user_id):
            current = self.get(user_id, activity_id)
            if "name" in changes:
                changes["name"] = (changes["name"] or "").strip()
            if "behavior_id" in changes:
                changes["behavior_id"] = (changes["behavior_id"] or "").strip() or None
                if changes["behavior_id"]:
                    self._ensure_behavior(user_id, changes["behavior_id"])
            try:
                updated = current.evolve(**changes)
            except ValidationError as exc:
                raise InvalidInputError(exc.errors()[0]["msg"]) from exc

            if updated.sort_key != current.sort_key:
                self.store.delete(keys.user_pk(user_id), current.sort_key)
            self._save(updated)
            if updated.pending_quantity > 0:
                self._sync_pending(updated)
        return updated

    def delete(self, user_id: str, activity_id: str) -> None:
        """Remove an activity together with its pending item."""
        with user_lock(user_id):
            activity = self.get(user_id, activity_id)
            self.store.delete(keys.user_pk(user_id), activity.sort_key)
            self.pending.sync_for_reference(user_id, PendingType.ACTIVITY, activity_id, None, "")
        logger.info("Deleted activity %s for %s", activity_id, user_id)

    def _sync_pending(self, activity: Activity) -> None:
        amount = activity.pending_amount() if activity.pending_quantity > 0 else None
        self.pending.sync_for_reference(
            activity.user_id,
            PendingType.ACTIVITY,
            activity.activity_id,
            amount,
            activity.pending_reason(),
        )

    def change_pending_quantity(self, user_id: str, activity_id: str, delta: int) -> Activity:
        """Adjust the pending quantity and keep the matching pending item in sync.

        The quantity never drops below zero; the activity becomes ``pending``
        while the quantity is positive and ``false`` once it reaches zero.
        """
        with user_lock(user_id):
            activity = self.get(user_id, activity_id)
            updated = activity.with_pending_quantity(activity.pending_quantity + int(delta))
            self._save(updated)
            self._sync_pending(updated)
        logger.info(
            "Pending quantity for %s: %s -> %s",
            activity_id,
            activity.pending_quantity,
            updated.pending_quantity,
        )
        return updated

    def approve_activity(self, user_id: str, activity_id: str) -> Activity | None:
        """Apply an approval; returns ``None`` when a ``once`` activity is removed."""
        with user_lock(user_id):
            activity = self.get(user_id, activity_id)
            approved = activity.approved()
            if approved is None:
                self.store.delete(keys.user_pk(user_id), activity.sort_key)
                logger.info("Deleted once activity %s (%s)", activity_id, activity.name)
                return None
            self._save(approved)
        logger.info("Approved activity %s (%s)", activity_id, activity.repeat.value)
        return approved

    def deny_activity(self, user_id: str, activity_id: str) -> Activity:
        with user_lock(user_id):
            denied = self.get(user_id, activity_id).denied()
            self._save(denied)
        logger.info("Reset pending quantity for activity %s", activity_id)
        return denied
