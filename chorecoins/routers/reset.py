"""Manual reset endpoints for the current user."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from chorecoins.dependencies import get_current_user_id, get_item_store
from chorecoins.domain.activity import RepeatType
from chorecoins.schemas.reset import ResetRequest
from chorecoins.services.reset_service import ResetService
from chorecoins.store.base import ItemStore

router = APIRouter()


@router.post("/daily")
def run_daily_reset(
    user_id: str = Depends(get_current_user_id),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    """Settle today's daily activities now, whether or not auto reset is on."""
    summary = ResetService(store).run_daily_reset(user_id)
    return {
        "summary": summary.model_dump(mode="json"),
        "message": (
            f"Daily reset: approved {summary.approved_activities}, "
            f"reset {summary.reset_activities}, {summary.errors} errors"
        ),
    }


@router.get("/preview")
def preview_reset(
    reset_type: RepeatType = Query(default=RepeatType.DAILY),
    user_id: str = Depends(get_current_user_id),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    items = ResetService(store).preview_reset(user_id, reset_type)
    return {"reset_type": reset_type.value, "items": items, "count": len(items)}


@router.post("")
def reset_flags(
    payload: ResetRequest,
    user_id: str = Depends(get_current_user_id),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    """Clear completion flags for one repeat type without settling anything."""
    result = ResetService(store).reset_repeating(user_id, payload.reset_type)
    message = f"Reset {result.reset_count} {result.reset_type} items"
    if result.skipped:
        message += f", {result.skipped} still awaiting approval"
    return {
        **result.model_dump(mode="json"),
        "reset_count": result.reset_count,
        "message": message,
    }
