"""Pytest fixtures for backend tests."""

from __future__ import annotations

import os
from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient


def _set_default_env() -> None:
    os.environ.setdefault("STORE_BACKEND", "memory")
    os.environ.setdefault("SUPABASE_URL", "https://example.supabase.co")
    os.environ.setdefault("SUPABASE_SERVICE_KEY", "service-key")
    os.environ.setdefault("ENABLE_SCHEDULER", "false")
    os.environ.setdefault("CRON_SECRET", "")


_set_default_env()

from chorecoins.services.activity_service import ActivityService  # noqa: E402
from chorecoins.services.ledger_service import LedgerService  # noqa: E402
from chorecoins.services.pending_service import PendingRewardService  # noqa: E402
from chorecoins.services.reset_service import ResetService  # noqa: E402
from chorecoins.services.settlement_service import SettlementService  # noqa: E402
from chorecoins.services.todo_service import TodoService  # noqa: E402
from chorecoins.services.user_service import UserService  # noqa: E402
from chorecoins.store.memory import MemoryItemStore  # noqa: E402

USER_ID = "kid-1"


@pytest.fixture
def store() -> MemoryItemStore:
    """A fresh in-memory item store per test."""
    return MemoryItemStore()


@pytest.fixture
def user_id(store: MemoryItemStore) -> str:
    """Register the default test user and return its id."""
    UserService(store).register(USER_ID, "Kid")
    return USER_ID


@pytest.fixture
def ledger(store: MemoryItemStore) -> LedgerService:
    return LedgerService(store)


@pytest.fixture
def pending(store: MemoryItemStore) -> PendingRewardService:
    return PendingRewardService(store)


@pytest.fixture
def activities(store: MemoryItemStore) -> ActivityService:
    return ActivityService(store)


@pytest.fixture
def todos(store: MemoryItemStore) -> TodoService:
    return TodoService(store)


@pytest.fixture
def settlement(store: MemoryItemStore) -> SettlementService:
    return SettlementService(store)


@pytest.fixture
def resets(store: MemoryItemStore) -> ResetService:
    return ResetService(store)


@pytest.fixture
def client(store: MemoryItemStore) -> Iterator[TestClient]:
    """Create a FastAPI test client bound to the per-test store."""
    from chorecoins.dependencies import get_item_store
    from chorecoins.main import app

    app.dependency_overrides[get_item_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()
