"""Balance log endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from chorecoins.dependencies import get_current_user_id, get_item_store
from chorecoins.schemas.ledger import BackupRequest
from chorecoins.services.ledger_service import LedgerService
from chorecoins.store.base import ItemStore
from chorecoins.utils.money import format_money, money_str

router = APIRouter()


@router.get("")
def list_logs(
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    user_id: str = Depends(get_current_user_id),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    """Return balance log entries, newest first."""
    entries = LedgerService(store).list_logs(user_id)
    page = entries[offset : offset + limit]
    return {
        "logs": [{**entry.model_dump(mode="json"), "amount": money_str(entry.amount)} for entry in page],
        "total": len(entries),
    }


@router.delete("")
def purge_logs(
    user_id: str = Depends(get_current_user_id),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    """Delete every log entry; the balance is not changed."""
    result = LedgerService(store).purge_logs(user_id)
    return {
        **result.model_dump(mode="json"),
        "message": f"Deleted {result.deleted_count} of {result.total_found} logs",
    }


@router.post("/backup")
def backup_to_log(
    payload: BackupRequest,
    user_id: str = Depends(get_current_user_id),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    """Roll the balance back to a log point and remove the later logs."""
    result = LedgerService(store).backup_to(user_id, payload.log_id, payload.target_balance)
    return {
        **result.model_dump(mode="json"),
        "message": (
            f"Restored balance to {format_money(result.balance_after)} "
            f"and removed {result.deleted_count} logs"
        ),
    }
