"""FastAPI dependency injection helpers."""

from __future__ import annotations

import hmac

from fastapi import Header

from chorecoins.config import settings
from chorecoins.store import get_store
from chorecoins.store.base import ItemStore
from chorecoins.utils.errors import UnauthorizedError


def get_item_store() -> ItemStore:
    """Return the process-wide item store used by services."""
    return get_store()


def get_current_user_id(x_user_id: str = Header(None)) -> str:
    """Return the acting user id from the ``X-User-Id`` header.

    Credential checks happen in front of this API; the header carries the
    already-authenticated user.

    Raises:
        UnauthorizedError: 401 if the header is missing or blank.
    """
    if not x_user_id or not x_user_id.strip():
        raise UnauthorizedError("Missing X-User-Id header")
    return x_user_id.strip()


def verify_cron_request(authorization: str = Header(None)) -> None:
    """Require ``Authorization: Bearer <CRON_SECRET>`` when a secret is configured."""
    secret = settings.cron_secret
    if not secret:
        return
    if not authorization or not authorization.startswith("Bearer "):
        raise UnauthorizedError("Missing authorization header")
    token = authorization.split(" ", 1)[1]
    if not hmac.compare_digest(token.encode(), secret.encode()):
        raise UnauthorizedError("Invalid cron secret")
