"""Todo endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from chorecoins.dependencies import get_current_user_id, get_item_store
from chorecoins.schemas.activity import TodoCreateRequest
from chorecoins.services.todo_service import TodoService
from chorecoins.store.base import ItemStore
from chorecoins.utils.money import format_money

router = APIRouter()


@router.get("")
def list_todos(
    user_id: str = Depends(get_current_user_id),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    todos = TodoService(store).list_todos(user_id)
    return {"todos": [todo.model_dump(mode="json") for todo in todos]}


@router.post("", status_code=201)
def create_todo(
    payload: TodoCreateRequest,
    user_id: str = Depends(get_current_user_id),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    todo = TodoService(store).create(user_id, payload.text, payload.money, payload.repeat)
    return {"todo": todo.model_dump(mode="json"), "message": f"Created todo {todo.text}"}


@router.delete("/{todo_id}")
def delete_todo(
    todo_id: str,
    user_id: str = Depends(get_current_user_id),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    TodoService(store).delete(user_id, todo_id)
    return {"deleted": True, "message": "Todo deleted"}


@router.post("/{todo_id}/done")
def mark_todo_done(
    todo_id: str,
    user_id: str = Depends(get_current_user_id),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    """Propose the todo's reward for approval."""
    pending = TodoService(store).mark_done(user_id, todo_id)
    return {
        "pending": pending.model_dump(mode="json"),
        "message": f"{pending.reason}: {format_money(pending.amount)} awaiting approval",
    }


@router.post("/{todo_id}/undo")
def undo_todo(
    todo_id: str,
    user_id: str = Depends(get_current_user_id),
    store: ItemStore = Depends(get_item_store),
) -> dict:
    todo = TodoService(store).undo(user_id, todo_id)
    return {"todo": todo.model_dump(mode="json"), "message": f"Reopened todo {todo.text}"}
