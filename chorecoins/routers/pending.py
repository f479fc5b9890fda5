"""Pending reward endpoints: propose, edit, approve and deny."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from chorecoins.dependencies import get_current_user_id, get_item_store
from chorecoins.domain.results import BatchResult
from chorecoins.schemas.pending import PendingProposeRequest, PendingUpdateRequest
from chorecoins.services.pending_service import PendingRewardService
from chorecoins.services.settlement_service import SettlementService
from chorecoins.store.base import ItemStore
from chorecoins.utils.money import ZERO, format_money, format_signed, money_str

router = APIRouter()


def _batch_payload(result: BatchResult, verb: str) -> dict:
    message = f"{verb} {result.processed} items totaling {format_money(result.total_amount)}"
    if result.failed:
        message += f" ({result.failed} failed)"
    return {
        **result.model_dump(mode="json"),
        "succeeded": result.succeeded,
        "message": message,
    }


@router.get("")
def list_pending(
    user_id: str = Depends(get_current_user_id),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    """Return pending items in creation order with their running total."""
    items = PendingRewardService(store).list_pending(user_id)
    total = sum((item.amount for item in items), start=ZERO)
    return {
        "pending": [item.model_dump(mode="json") for item in items],
        "total": money_str(total),
    }


@router.post("", status_code=201)
def propose_pending(
    payload: PendingProposeRequest,
    user_id: str = Depends(get_current_user_id),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    pending = PendingRewardService(store).propose(
        user_id, payload.amount, payload.reason, payload.type, payload.reference_id
    )
    return {
        "pending": pending.model_dump(mode="json"),
        "message": f"Proposed {format_signed(pending.amount)}: {pending.reason}",
    }


@router.patch("/{pending_id}")
def update_pending(
    pending_id: str,
    payload: PendingUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    pending = PendingRewardService(store).update(
        user_id, pending_id, amount=payload.amount, reason=payload.reason
    )
    return {"pending": pending.model_dump(mode="json"), "message": "Pending item updated"}


@router.post("/approve-all")
def approve_all(
    user_id: str = Depends(get_current_user_id),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    """Approve every pending item in creation order."""
    return _batch_payload(SettlementService(store).approve_all(user_id), "Approved")


@router.post("/deny-all")
def deny_all(
    user_id: str = Depends(get_current_user_id),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    return _batch_payload(SettlementService(store).deny_all(user_id), "Denied")


@router.post("/{pending_id}/approve")
def approve_pending(
    pending_id: str,
    user_id: str = Depends(get_current_user_id),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    """Settle one pending item into the balance."""
    change = SettlementService(store).approve_one(user_id, pending_id)
    return {
        **change.model_dump(mode="json"),
        "amount": money_str(change.amount),
        "message": (
            f"Approved {format_signed(change.amount)}. "
            f"Balance is now {format_money(change.balance_after)}"
        ),
    }


@router.post("/{pending_id}/deny")
def deny_pending(
    pending_id: str,
    user_id: str = Depends(get_current_user_id),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    """Discard one pending item without touching the balance."""
    pending = SettlementService(store).deny_one(user_id, pending_id)
    return {"pending": pending.model_dump(mode="json"), "message": f"Denied: {pending.reason}"}
