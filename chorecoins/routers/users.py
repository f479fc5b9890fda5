"""User registration and settings endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from chorecoins.dependencies import get_current_user_id, get_item_store
from chorecoins.schemas.user import RegisterRequest, SettingsUpdateRequest
from chorecoins.services.ledger_service import LedgerService
from chorecoins.services.user_service import UserService
from chorecoins.store.base import ItemStore
from chorecoins.utils.money import money_str

router = APIRouter()


@router.post("", status_code=201)
def register_user(
    payload: RegisterRequest,
    store: ItemStore = Depends(get_item_store),
) -> dict:
    """Create a user record with default settings."""
    account = UserService(store).register(payload.user_id, payload.username)
    return {
        "user": account.model_dump(mode="json"),
        "message": f"Registered {account.username}",
    }


@router.get("/me")
def get_me(
    user_id: str = Depends(get_current_user_id),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    account = UserService(store).get_user(user_id)
    balance = LedgerService(store).get_balance(user_id)
    return {"user": account.model_dump(mode="json"), "balance": money_str(balance)}


@router.get("/me/settings")
def get_settings(
    user_id: str = Depends(get_current_user_id),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    return {"settings": UserService(store).get_settings(user_id).model_dump(mode="json")}


@router.patch("/me/settings")
def update_settings(
    payload: SettingsUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    """Update completion award, incompletion fine and auto reset."""
    updated = UserService(store).update_settings(user_id, **payload.model_dump())
    return {"settings": updated.model_dump(mode="json"), "message": "Settings updated"}
