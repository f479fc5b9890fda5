"""Activity endpoints, including pending quantity changes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from chorecoins.dependencies import get_current_user_id, get_item_store
from chorecoins.schemas.activity import (
    ActivityCreateRequest,
    ActivityUpdateRequest,
    QuantityChangeRequest,
)
from chorecoins.services.activity_service import ActivityService
from chorecoins.store.base import ItemStore
from chorecoins.utils.money import format_signed

router = APIRouter()


@router.get("")
def list_activities(
    behavior_id: str | None = Query(default=None),
    standalone: bool | None = Query(default=None),
    user_id: str = Depends(get_current_user_id),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    """Return all, one behavior's, or only standalone activities."""
    activities = ActivityService(store).list_activities(
        user_id, behavior_id=behavior_id, standalone=standalone
    )
    return {"activities": [activity.model_dump(mode="json") for activity in activities]}


@router.post("", status_code=201)
def create_activity(
    payload: ActivityCreateRequest,
    user_id: str = Depends(get_current_user_id),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    activity = ActivityService(store).create(user_id, **payload.model_dump())
    return {"activity": activity.model_dump(mode="json"), "message": f"Created {activity.name}"}


@router.get("/{activity_id}")
def get_activity(
    activity_id: str,
    user_id: str = Depends(get_current_user_id),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    activity = ActivityService(store).get(user_id, activity_id)
    return {"activity": activity.model_dump(mode="json"), "state": activity.state.value}


@router.patch("/{activity_id}")
def update_activity(
    activity_id: str,
    payload: ActivityUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    """Edit an activity; sending ``behavior_id: null`` makes it standalone."""
    changes = payload.model_dump(exclude_unset=True)
    activity = ActivityService(store).update(user_id, activity_id, **changes)
    return {"activity": activity.model_dump(mode="json"), "message": f"Updated {activity.name}"}


@router.delete("/{activity_id}")
def delete_activity(
    activity_id: str,
    user_id: str = Depends(get_current_user_id),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    ActivityService(store).delete(user_id, activity_id)
    return {"deleted": True, "message": "Activity deleted"}


@router.post("/{activity_id}/quantity")
def change_quantity(
    activity_id: str,
    payload: QuantityChangeRequest,
    user_id: str = Depends(get_current_user_id),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    """Add to or remove from the pending quantity awaiting approval."""
    activity = ActivityService(store).change_pending_quantity(user_id, activity_id, payload.delta)
    if activity.pending_quantity:
        message = (
            f"{activity.pending_reason()}: {format_signed(activity.pending_amount())} "
            "awaiting approval"
        )
    else:
        message = f"No pending completions for {activity.name}"
    return {
        "activity": activity.model_dump(mode="json"),
        "state": activity.state.value,
        "message": message,
    }
