"""Item store backed by a single Supabase (PostgREST) table.

Expected table layout::

    create table items (
        partition_key text not null,
        sort_key text not null,
        data jsonb not null default '{}'::jsonb,
        primary key (partition_key, sort_key)
    );
"""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx
from postgrest import APIError

from chorecoins.config import settings
from chorecoins.store.base import PARTITION_KEY, SORT_KEY, Item, join_item, split_item
from chorecoins.utils.errors import ConflictError, NotFoundError, StoreError
from supabase import Client

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


def _attr_filter(name: str) -> str:
    return f"data->>{name}"


def _attr_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _match_attrs(query, attributes: dict[str, Any]):
    """Chain one filter per attribute; ``None`` matches a missing attribute."""
    for name, value in attributes.items():
        if value is None:
            query = query.is_(_attr_filter(name), "null")
        else:
            query = query.eq(_attr_filter(name), _attr_value(value))
    return query


class SupabaseItemStore:
    """Thin wrapper around a Supabase client implementing ``ItemStore``."""

    def __init__(self, client: Client, table: str | None = None) -> None:
        self.client = client
        self.table = table or settings.items_table

    def execute(self, query, default: Any = None) -> Any:
        """Execute a PostgREST query and normalize transport errors."""
        started = time.perf_counter()
        try:
            response = query.execute()
        except APIError as exc:
            message = str(getattr(exc, "message", None) or "Item store request failed")
            if getattr(exc, "code", None) == UNIQUE_VIOLATION:
                raise ConflictError(message) from exc
            raise StoreError("Item store request failed", details=message) from exc
        except httpx.HTTPError as exc:
            raise StoreError("Item store unreachable", details=str(exc)) from exc

        elapsed_ms = (time.perf_counter() - started) * 1000
        threshold_ms = settings.slow_query_log_threshold_ms
        if threshold_ms > 0 and elapsed_ms >= threshold_ms:
            logger.warning("Slow item store query on %s %.1fms", self.table, elapsed_ms)
        data = response.data
        return default if data is None and default is not None else data

    @staticmethod
    def _to_item(row: dict[str, Any]) -> Item:
        return join_item(str(row[PARTITION_KEY]), str(row[SORT_KEY]), dict(row.get("data") or {}))

    def get(self, partition_key: str, sort_key: str) -> Item | None:
        rows = self.execute(
            self.client.table(self.table)
            .select("*")
            .eq(PARTITION_KEY, partition_key)
            .eq(SORT_KEY, sort_key)
            .limit(1),
            default=[],
        )
        return self._to_item(rows[0]) if rows else None

    def put(self, item: Item, *, if_not_exists: bool = False) -> Item:
        partition_key, sort_key, attributes = split_item(item)
        row = {PARTITION_KEY: partition_key, SORT_KEY: sort_key, "data": attributes}
        table = self.client.table(self.table)
        query = table.insert(row) if if_not_exists else table.upsert(row)
        rows = self.execute(query, default=[])
        if not rows:
            raise StoreError(f"Failed to write {sort_key}")
        return self._to_item(rows[0])

    def update(
        self,
        partition_key: str,
        sort_key: str,
        changes: dict[str, Any],
        *,
        expected: dict[str, Any] | None = None,
    ) -> Item:
        current = self.get(partition_key, sort_key)
        if current is None:
            raise NotFoundError(f"Item {partition_key}/{sort_key}")
        _, _, attributes = split_item(current)
        attributes.update(changes)

        query = (
            self.client.table(self.table)
            .update({"data": attributes})
            .eq(PARTITION_KEY, partition_key)
            .eq(SORT_KEY, sort_key)
        )
        query = _match_attrs(query, expected or {})
        rows = self.execute(query, default=[])
        if not rows:
            if self.get(partition_key, sort_key) is None:
                raise NotFoundError(f"Item {partition_key}/{sort_key}")
            raise ConflictError(f"Condition failed for {sort_key}")
        return self._to_item(rows[0])

    def delete(self, partition_key: str, sort_key: str, *, must_exist: bool = True) -> None:
        rows = self.execute(
            self.client.table(self.table)
            .delete()
            .eq(PARTITION_KEY, partition_key)
            .eq(SORT_KEY, sort_key),
            default=[],
        )
        if not rows and must_exist:
            raise NotFoundError(f"Item {partition_key}/{sort_key}")

    def query(self, partition_key: str, sort_key_prefix: str = "") -> list[Item]:
        def build():
            query = self.client.table(self.table).select("*").eq(PARTITION_KEY, partition_key)
            if sort_key_prefix:
                query = query.like(SORT_KEY, f"{sort_key_prefix}%")
            return query.order(SORT_KEY)

        return self._paged(build)

    def scan(
        self,
        sort_key_prefix: str = "",
        filters: dict[str, Any] | None = None,
    ) -> list[Item]:
        def build():
            query = self.client.table(self.table).select("*")
            if sort_key_prefix:
                query = query.like(SORT_KEY, f"{sort_key_prefix}%")
            query = _match_attrs(query, filters or {})
            return query.order(PARTITION_KEY).order(SORT_KEY)

        return self._paged(build)

    def _paged(self, build) -> list[Item]:
        page_size = max(1, settings.store_page_size)
        items: list[Item] = []
        offset = 0
        while True:
            rows = self.execute(build().range(offset, offset + page_size - 1), default=[])
            items.extend(self._to_item(row) for row in rows)
            if len(rows) < page_size:
                return items
            offset += page_size
