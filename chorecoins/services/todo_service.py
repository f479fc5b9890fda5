"""Todo records and their completion flow."""

from __future__ import annotations

import logging
import uuid
from typing import Any

from pydantic import ValidationError

from chorecoins.domain.activity import CompletionStatus, RepeatType
from chorecoins.domain.pending import PendingReward, PendingType
from chorecoins.domain.todo import Todo
from chorecoins.services.ledger_service import user_lock
from chorecoins.services.pending_service import PendingRewardService
from chorecoins.store import keys
from chorecoins.store.base import ItemStore
from chorecoins.utils.errors import ConflictError, InvalidInputError, NotFoundError
from chorecoins.utils.time import now_utc

logger = logging.getLogger(__name__)


class TodoService:
    """Create todos, mark them done and apply approvals."""

    def __init__(self, store: ItemStore) -> None:
        self.store = store
        self.pending = PendingRewardService(store)

    def list_todos(self, user_id: str) -> list[Todo]:
        items = self.store.query(keys.user_pk(user_id), keys.TODO_PREFIX)
        return [Todo.from_item(item) for item in items]

    def get(self, user_id: str, todo_id: str) -> Todo:
        item = self.store.get(keys.user_pk(user_id), keys.todo_sk(todo_id))
        if item is None:
            raise NotFoundError("Todo")
        return Todo.from_item(item)

    def _save(self, todo: Todo) -> None:
        self.store.put(todo.to_item())

    def create(self, user_id: str, text: str, money: Any, repeat: Any = RepeatType.ONCE) -> Todo:
        try:
            todo = Todo(
                todo_id=str(uuid.uuid4()),
                user_id=user_id,
                text=(text or "").strip(),
                money=money,
                repeat=repeat,
            )
        except ValidationError as exc:
            raise InvalidInputError(exc.errors()[0]["msg"]) from exc
        self.store.put(todo.to_item(), if_not_exists=True)
        logger.info("Created todo %s for %s", todo.todo_id, user_id)
        return todo

    def delete(self, user_id: str, todo_id: str) -> None:
        with user_lock(user_id):
            self.store.delete(keys.user_pk(user_id), keys.todo_sk(todo_id))
            self.pending.sync_for_reference(user_id, PendingType.TODO, todo_id, None, "")

    def mark_done(self, user_id: str, todo_id: str) -> PendingReward:
        """Propose the todo's reward and mark it as awaiting approval."""
        with user_lock(user_id):
            todo = self.get(user_id, todo_id)
            if todo.completed is CompletionStatus.TRUE:
                raise ConflictError("Todo is already completed")
            if self.pending.find_for_reference(user_id, PendingType.TODO, todo_id):
                raise ConflictError("Todo is already awaiting approval")

            pending = self.pending.propose(
                user_id, todo.money, todo.pending_reason(), PendingType.TODO, todo_id
            )
            self._save(todo.evolve(completed=CompletionStatus.PENDING))
        return pending

    def undo(self, user_id: str, todo_id: str) -> Todo:
        """Withdraw a not-yet-approved completion."""
        with user_lock(user_id):
            todo = self.get(user_id, todo_id)
            self.pending.sync_for_reference(user_id, PendingType.TODO, todo_id, None, "")
            reverted = todo.evolve(completed=CompletionStatus.FALSE)
            self._save(reverted)
        return reverted

    def approve_todo(self, user_id: str, todo_id: str) -> Todo | None:
        """Apply an approval; returns ``None`` when a ``once`` todo is removed."""
        with user_lock(user_id):
            todo = self.get(user_id, todo_id)
            approved = todo.approved(now_utc())
            if approved is None:
                self.store.delete(keys.user_pk(user_id), keys.todo_sk(todo_id))
                logger.info("Deleted once todo %s (%s)", todo_id, todo.text)
                return None
            self._save(approved)
        logger.info("Approved recurring todo %s (%s)", todo_id, todo.text)
        return approved
