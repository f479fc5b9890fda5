"""Item store backends and the process-wide store factory."""

from __future__ import annotations

from functools import lru_cache

from chorecoins.config import settings
from chorecoins.store.base import Item, ItemStore
from chorecoins.store.memory import MemoryItemStore


@lru_cache(maxsize=1)
def get_store() -> ItemStore:
    """Return the configured item store (``STORE_BACKEND``)."""
    backend = settings.store_backend.strip().lower()
    if backend == "memory":
        return MemoryItemStore()
    if backend == "supabase":
        from chorecoins.store.supabase_store import SupabaseItemStore
        from chorecoins.utils.supabase_client import get_items_client

        return SupabaseItemStore(get_items_client())
    raise ValueError(f"Unknown STORE_BACKEND {settings.store_backend!r}")


__all__ = ["Item", "ItemStore", "MemoryItemStore", "get_store"]
