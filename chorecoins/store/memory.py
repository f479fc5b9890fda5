"""Thread-safe in-process item store for tests and local development."""

from __future__ import annotations

import copy
import threading
from typing import Any

from chorecoins.store.base import Item, join_item, split_item
from chorecoins.utils.errors import ConflictError, NotFoundError


class MemoryItemStore:
    """Dict-backed implementation of :class:`~chorecoins.store.base.ItemStore`."""

    def __init__(self) -> None:
        self._items: dict[tuple[str, str], dict[str, Any]] = {}
        self._lock = threading.Lock()

    def get(self, partition_key: str, sort_key: str) -> Item | None:
        with self._lock:
            attributes = self._items.get((partition_key, sort_key))
            if attributes is None:
                return None
            return join_item(partition_key, sort_key, copy.deepcopy(attributes))

    def put(self, item: Item, *, if_not_exists: bool = False) -> Item:
        partition_key, sort_key, attributes = split_item(item)
        with self._lock:
            if if_not_exists and (partition_key, sort_key) in self._items:
                raise ConflictError(f"Item {partition_key}/{sort_key} already exists")
            self._items[(partition_key, sort_key)] = copy.deepcopy(attributes)
        return join_item(partition_key, sort_key, copy.deepcopy(attributes))

    def update(
        self,
        partition_key: str,
        sort_key: str,
        changes: dict[str, Any],
        *,
        expected: dict[str, Any] | None = None,
    ) -> Item:
        with self._lock:
            current = self._items.get((partition_key, sort_key))
            if current is None:
                raise NotFoundError(f"Item {partition_key}/{sort_key}")
            for name, value in (expected or {}).items():
                if current.get(name) != value:
                    raise ConflictError(f"Condition failed on {name} for {sort_key}")
            current.update(copy.deepcopy(changes))
            return join_item(partition_key, sort_key, copy.deepcopy(current))

    def delete(self, partition_key: str, sort_key: str, *, must_exist: bool = True) -> None:
        with self._lock:
            removed = self._items.pop((partition_key, sort_key), None)
        if removed is None and must_exist:
            raise NotFoundError(f"Item {partition_key}/{sort_key}")

    def query(self, partition_key: str, sort_key_prefix: str = "") -> list[Item]:
        with self._lock:
            rows = [
                join_item(pk, sk, copy.deepcopy(attributes))
                for (pk, sk), attributes in self._items.items()
                if pk == partition_key and sk.startswith(sort_key_prefix)
            ]
        return sorted(rows, key=lambda row: row["sort_key"])

    def scan(
        self,
        sort_key_prefix: str = "",
        filters: dict[str, Any] | None = None,
    ) -> list[Item]:
        wanted = filters or {}
        with self._lock:
            rows = [
                join_item(pk, sk, copy.deepcopy(attributes))
                for (pk, sk), attributes in self._items.items()
                if sk.startswith(sort_key_prefix)
                and all(attributes.get(name) == value for name, value in wanted.items())
            ]
        return sorted(rows, key=lambda row: (row["partition_key"], row["sort_key"]))
