"""Behavior group endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from chorecoins.dependencies import get_current_user_id, get_item_store
from chorecoins.schemas.activity import BehaviorCreateRequest
from chorecoins.services.activity_service import ActivityService
from chorecoins.services.behavior_service import BehaviorService
from chorecoins.store.base import ItemStore

router = APIRouter()


@router.get("")
def list_behaviors(
    user_id: str = Depends(get_current_user_id),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    """Return behaviors with their grouped activities."""
    activities = ActivityService(store)
    behaviors = []
    for behavior in BehaviorService(store).list_behaviors(user_id):
        grouped = activities.list_activities(user_id, behavior_id=behavior.behavior_id)
        behaviors.append(
            {
                **behavior.model_dump(mode="json"),
                "activities": [activity.model_dump(mode="json") for activity in grouped],
            }
        )
    return {"behaviors": behaviors}


@router.post("", status_code=201)
def create_behavior(
    payload: BehaviorCreateRequest,
    user_id: str = Depends(get_current_user_id),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    behavior = BehaviorService(store).create(user_id, payload.name)
    return {"behavior": behavior.model_dump(mode="json"), "message": f"Created {behavior.name}"}


@router.delete("/{behavior_id}")
def delete_behavior(
    behavior_id: str,
    user_id: str = Depends(get_current_user_id),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    """Delete a behavior and every activity grouped under it."""
    removed = BehaviorService(store).delete(user_id, behavior_id)
    return {
        "deleted": True,
        "deleted_activities": removed,
        "message": f"Deleted behavior and {removed} activities",
    }
