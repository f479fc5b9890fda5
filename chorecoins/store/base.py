"""Item store contract shared by the Supabase and in-memory backends."""

from __future__ import annotations

from typing import Any, Protocol

Item = dict[str, Any]

PARTITION_KEY = "partition_key"
SORT_KEY = "sort_key"


class ItemStore(Protocol):
    """Generic conditional key-value operations over one flat collection.

    Items are plain dicts carrying ``partition_key`` and ``sort_key`` next to
    their attributes. Condition failures raise ``ConflictError``; missing
    targets raise ``NotFoundError``; transport failures raise ``StoreError``.
    """

    def get(self, partition_key: str, sort_key: str) -> Item | None: ...

    def put(self, item: Item, *, if_not_exists: bool = False) -> Item: ...

    def update(
        self,
        partition_key: str,
        sort_key: str,
        changes: dict[str, Any],
        *,
        expected: dict[str, Any] | None = None,
    ) -> Item: ...

    def delete(self, partition_key: str, sort_key: str, *, must_exist: bool = True) -> None: ...

    def query(self, partition_key: str, sort_key_prefix: str = "") -> list[Item]: ...

    def scan(
        self,
        sort_key_prefix: str = "",
        filters: dict[str, Any] | None = None,
    ) -> list[Item]: ...


def split_item(item: Item) -> tuple[str, str, dict[str, Any]]:
    """Return ``(partition_key, sort_key, attributes)`` for an item dict."""
    try:
        partition_key = str(item[PARTITION_KEY])
        sort_key = str(item[SORT_KEY])
    except KeyError as exc:
        raise ValueError(f"Item is missing key attribute {exc.args[0]!r}") from exc
    attributes = {k: v for k, v in item.items() if k not in (PARTITION_KEY, SORT_KEY)}
    return partition_key, sort_key, attributes


def join_item(partition_key: str, sort_key: str, attributes: dict[str, Any]) -> Item:
    return {PARTITION_KEY: partition_key, SORT_KEY: sort_key, **attributes}
