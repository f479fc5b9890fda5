"""User registration and reset settings."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from chorecoins.domain.user import UserAccount, UserSettings
from chorecoins.store import keys
from chorecoins.store.base import ItemStore
from chorecoins.utils.errors import ConflictError, InvalidInputError, NotFoundError
from chorecoins.utils.time import now_utc

logger = logging.getLogger(__name__)

_SETTING_FIELDS = ("complete_award", "uncomplete_fine", "auto_reset")


class UserService:
    """Read and write the per-user ``METADATA`` record."""

    def __init__(self, store: ItemStore) -> None:
        self.store = store

    def register(self, user_id: str, username: str | None = None) -> UserAccount:
        user_id = (user_id or "").strip()
        if not user_id:
            raise InvalidInputError("User id is required")
        account = UserAccount(
            user_id=user_id,
            username=(username or "").strip() or user_id,
            created_at=now_utc(),
        )
        try:
            self.store.put(account.to_item(), if_not_exists=True)
        except ConflictError as exc:
            raise ConflictError("User is already registered", code="USER_EXISTS") from exc
        logger.info("Registered user %s", user_id)
        return account

    def get_user(self, user_id: str) -> UserAccount:
        item = self.store.get(keys.user_pk(user_id), keys.METADATA)
        if item is None:
            raise NotFoundError("User")
        return UserAccount.from_item(item)

    def get_settings(self, user_id: str) -> UserSettings:
        return self.get_user(user_id).settings

    def update_settings(self, user_id: str, **changes: Any) -> UserSettings:
        """Apply partial settings changes; ``None`` values are ignored."""
        unknown = set(changes) - set(_SETTING_FIELDS)
        if unknown:
            raise InvalidInputError(f"Unknown settings: {', '.join(sorted(unknown))}")

        account = self.get_user(user_id)
        merged = {
            **account.settings.model_dump(),
            **{name: value for name, value in changes.items() if value is not None},
        }
        try:
            updated = UserSettings.model_validate(merged)
        except ValidationError as exc:
            error = exc.errors()[0]
            field = ".".join(str(part) for part in error["loc"])
            raise InvalidInputError(f"{field}: {error['msg']}") from exc

        account.settings = updated
        self.store.put(account.to_item())
        logger.info("Updated settings for %s: %s", user_id, updated.model_dump(mode="json"))
        return updated

    def list_users(self) -> list[UserAccount]:
        return [UserAccount.from_item(item) for item in self.store.scan(keys.METADATA)]

    def list_auto_reset_users(self) -> list[UserAccount]:
        return [user for user in self.list_users() if user.settings.auto_reset]
