"""Supabase item store tests against a fake PostgREST client."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import httpx
import pytest
from postgrest import APIError

from chorecoins.store.supabase_store import SupabaseItemStore
from chorecoins.utils.errors import ConflictError, NotFoundError, StoreError


class FakeQuery:
    """Chainable stand-in for a PostgREST request builder."""

    def __init__(self, table: FakeTable, operation: str, payload: Any = None) -> None:
        self.table = table
        self.operation = operation
        self.payload = payload
        self.filters: list[tuple[str, str]] = []

    def __getattr__(self, name: str):
        def chain(*args: Any, **kwargs: Any) -> FakeQuery:
            if name in ("eq", "is_"):
                self.filters.append((args[0], args[1]))
            return self

        return chain

    def execute(self) -> SimpleNamespace:
        self.table.executed.append(self)
        outcome = self.table.responses[self.operation].pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return SimpleNamespace(data=outcome)


class FakeTable:
    def __init__(self, responses: dict[str, list[Any]]) -> None:
        self.responses = responses
        self.executed: list[FakeQuery] = []

    def select(self, *_: Any) -> FakeQuery:
        return FakeQuery(self, "select")

    def insert(self, row: dict) -> FakeQuery:
        return FakeQuery(self, "insert", row)

    def upsert(self, row: dict) -> FakeQuery:
        return FakeQuery(self, "upsert", row)

    def update(self, row: dict) -> FakeQuery:
        return FakeQuery(self, "update", row)

    def delete(self) -> FakeQuery:
        return FakeQuery(self, "delete")


class FakeClient:
    def __init__(self, **responses: list[Any]) -> None:
        self.items = FakeTable(responses)

    def table(self, name: str) -> FakeTable:
        assert name == "items"
        return self.items


ROW = {"partition_key": "USER#kid-1", "sort_key": "ACCOUNT#balance", "data": {"balance": "1.00", "version": 1}}


def test_get_joins_keys_and_data() -> None:
    store = SupabaseItemStore(FakeClient(select=[[ROW]]), table="items")
    item = store.get("USER#kid-1", "ACCOUNT#balance")
    assert item == {"partition_key": "USER#kid-1", "sort_key": "ACCOUNT#balance", "balance": "1.00", "version": 1}


def test_unique_violation_becomes_conflict() -> None:
    error = APIError({"message": "duplicate key value violates unique constraint", "code": "23505"})
    store = SupabaseItemStore(FakeClient(insert=[error]), table="items")
    with pytest.raises(ConflictError):
        store.put({"partition_key": "USER#kid-1", "sort_key": "METADATA"}, if_not_exists=True)


def test_api_error_becomes_store_error() -> None:
    error = APIError({"message": "permission denied", "code": "42501"})
    store = SupabaseItemStore(FakeClient(select=[error]), table="items")
    with pytest.raises(StoreError) as excinfo:
        store.get("USER#kid-1", "METADATA")
    assert excinfo.value.to_dict() == {
        "error": "Item store request failed",
        "code": "STORE_ERROR",
        "details": "permission denied",
    }


def test_transport_error_becomes_store_error() -> None:
    store = SupabaseItemStore(FakeClient(select=[httpx.ConnectError("boom")]), table="items")
    with pytest.raises(StoreError):
        store.query("USER#kid-1", "PENDING#")


def test_conditional_update_pushes_expected_values_into_filter() -> None:
    client = FakeClient(select=[[ROW]], update=[[{**ROW, "data": {"balance": "2.00", "version": 2}}]])
    store = SupabaseItemStore(client, table="items")

    item = store.update("USER#kid-1", "ACCOUNT#balance", {"balance": "2.00", "version": 2}, expected={"version": 1})

    update_query = client.items.executed[-1]
    assert ("data->>version", "1") in update_query.filters
    assert update_query.payload == {"data": {"balance": "2.00", "version": 2}}
    assert item["version"] == 2


def test_expected_none_matches_missing_attribute() -> None:
    legacy = {**ROW, "data": {"balance": "10"}}
    client = FakeClient(select=[[legacy]], update=[[{**ROW, "data": {"balance": "12.00", "version": 1}}]])
    store = SupabaseItemStore(client, table="items")

    store.update("USER#kid-1", "ACCOUNT#balance", {"balance": "12.00", "version": 1}, expected={"version": None})

    update_query = client.items.executed[-1]
    assert ("data->>version", "null") in update_query.filters
    assert ("data->>version", "None") not in update_query.filters


def test_conditional_update_mismatch_is_conflict() -> None:
    client = FakeClient(select=[[ROW], [ROW]], update=[[]])
    store = SupabaseItemStore(client, table="items")
    with pytest.raises(ConflictError):
        store.update("USER#kid-1", "ACCOUNT#balance", {"version": 3}, expected={"version": 2})


def test_update_and_delete_missing_rows() -> None:
    store = SupabaseItemStore(FakeClient(select=[[]], delete=[[]]), table="items")
    with pytest.raises(NotFoundError):
        store.update("USER#kid-1", "TODO#x", {"text": "y"})
    with pytest.raises(NotFoundError):
        store.delete("USER#kid-1", "TODO#x")


def test_query_reads_every_page(monkeypatch: pytest.MonkeyPatch) -> None:
    from chorecoins.config import settings

    monkeypatch.setattr(settings, "store_page_size", 2)
    rows = [{"partition_key": "USER#kid-1", "sort_key": f"PENDING#{n}", "data": {}} for n in range(3)]
    store = SupabaseItemStore(FakeClient(select=[rows[:2], rows[2:]]), table="items")

    items = store.query("USER#kid-1", "PENDING#")

    assert [item["sort_key"] for item in items] == ["PENDING#0", "PENDING#1", "PENDING#2"]
