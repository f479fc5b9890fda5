"""Endpoints for an external time trigger."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from chorecoins.dependencies import get_item_store, verify_cron_request
from chorecoins.domain.activity import RepeatType
from chorecoins.services.reset_service import ResetService
from chorecoins.store.base import ItemStore

router = APIRouter(dependencies=[Depends(verify_cron_request)])


@router.post("/daily-reset")
def cron_daily_reset(
    user_id: str | None = Query(default=None),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    """Run the daily settlement for all auto-reset users, or one user."""
    summary = ResetService(store).run_daily_reset(user_id)
    return {"summary": summary.model_dump(mode="json"), "success": summary.errors == 0}


@router.post("/repeat-reset")
def cron_repeat_reset(
    reset_type: RepeatType = Query(...),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    result = ResetService(store).run_repeat_reset(reset_type)
    return {**result.model_dump(mode="json"), "success": result.errors == 0}
