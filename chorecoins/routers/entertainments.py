"""Entertainment catalog and purchase endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from chorecoins.dependencies import get_current_user_id, get_item_store
from chorecoins.schemas.entertainment import EntertainmentUpdateRequest, PurchaseRequest
from chorecoins.services.entertainment_service import EntertainmentService
from chorecoins.store.base import ItemStore

router = APIRouter()


@router.get("")
def list_entertainments(
    user_id: str = Depends(get_current_user_id),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    """Return the user's catalog, creating the defaults on first visit."""
    entertainments = EntertainmentService(store).list_entertainments(user_id)
    return {"entertainments": [item.model_dump(mode="json") for item in entertainments]}


@router.patch("/{entertainment_id}")
def update_entertainment(
    entertainment_id: str,
    payload: EntertainmentUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    entertainment = EntertainmentService(store).update(
        user_id, entertainment_id, **payload.model_dump(exclude_unset=True)
    )
    return {
        "entertainment": entertainment.model_dump(mode="json"),
        "message": f"Updated {entertainment.name}",
    }


@router.post("/{entertainment_id}/purchase", status_code=201)
def purchase_entertainment(
    entertainment_id: str,
    payload: PurchaseRequest,
    user_id: str = Depends(get_current_user_id),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    """Request screen time; the cost waits in the pending queue."""
    result = EntertainmentService(store).purchase(user_id, entertainment_id, payload.coins)
    return result.model_dump(mode="json")
