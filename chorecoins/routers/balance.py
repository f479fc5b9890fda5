"""Balance endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from chorecoins.dependencies import get_current_user_id, get_item_store
from chorecoins.schemas.ledger import BalanceAdjustRequest, BalanceSetRequest
from chorecoins.services.ledger_service import LedgerService
from chorecoins.store.base import ItemStore
from chorecoins.utils.money import format_money, format_signed, money_str

router = APIRouter()


@router.get("")
def get_balance(
    user_id: str = Depends(get_current_user_id),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    """Return the current user's coin balance."""
    return {"balance": money_str(LedgerService(store).get_balance(user_id))}


@router.put("")
def set_balance(
    payload: BalanceSetRequest,
    user_id: str = Depends(get_current_user_id),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    """Overwrite the balance; the change is logged with ``reason``."""
    change = LedgerService(store).set_balance(user_id, payload.balance, payload.reason)
    return {
        **change.model_dump(mode="json"),
        "message": (
            f"Balance updated from {format_money(change.balance_before)} "
            f"to {format_money(change.balance_after)}"
        ),
    }


@router.post("/adjust")
def adjust_balance(
    payload: BalanceAdjustRequest,
    user_id: str = Depends(get_current_user_id),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    change = LedgerService(store).apply_delta(user_id, payload.amount, payload.reason)
    return {
        **change.model_dump(mode="json"),
        "message": f"Applied {format_signed(change.amount)}: {payload.reason}",
    }
