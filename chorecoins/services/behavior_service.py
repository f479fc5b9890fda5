"""Behavior groups for activities."""

from __future__ import annotations

import logging
import uuid

from pydantic import ValidationError

from chorecoins.domain.behavior import Behavior
from chorecoins.services.activity_service import ActivityService
from chorecoins.store import keys
from chorecoins.store.base import ItemStore
from chorecoins.utils.errors import InvalidInputError, NotFoundError
from chorecoins.utils.time import now_utc

logger = logging.getLogger(__name__)


class BehaviorService:
    def __init__(self, store: ItemStore) -> None:
        self.store = store
        self.activities = ActivityService(store)

    def create(self, user_id: str, name: str) -> Behavior:
        try:
            behavior = Behavior(
                behavior_id=str(uuid.uuid4()),
                user_id=user_id,
                name=(name or "").strip(),
                created_at=now_utc(),
            )
        except ValidationError as exc:
            raise InvalidInputError(exc.errors()[0]["msg"]) from exc
        self.store.put(behavior.to_item(), if_not_exists=True)
        return behavior

    def list_behaviors(self, user_id: str) -> list[Behavior]:
        items = self.store.query(keys.user_pk(user_id), keys.BEHAVIOR_PREFIX)
        return [Behavior.from_item(item) for item in items if keys.is_behavior_sk(item["sort_key"])]

    def get(self, user_id: str, behavior_id: str) -> Behavior:
        item = self.store.get(keys.user_pk(user_id), keys.behavior_sk(behavior_id))
        if item is None:
            raise NotFoundError("Behavior")
        return Behavior.from_item(item)

    def delete(self, user_id: str, behavior_id: str) -> int:
        """Delete a behavior and its activities; returns the number of activities removed."""
        self.get(user_id, behavior_id)
        activities = self.activities.list_activities(user_id, behavior_id=behavior_id)
        for activity in activities:
            self.activities.delete(user_id, activity.activity_id)
        self.store.delete(keys.user_pk(user_id), keys.behavior_sk(behavior_id))
        logger.info("Deleted behavior %s with %s activities", behavior_id, len(activities))
        return len(activities)
