"""Shared Supabase connection for the ``items`` table.

Only the item store talks to Supabase. It runs in request threads and in the
scheduler, so one service-role client with one pooled httpx transport is
built per process and reused by both.
"""

from functools import lru_cache

import httpx
from supabase.lib.client_options import SyncClientOptions

from chorecoins.config import settings
from supabase import Client, create_client

MIN_CONNECTIONS = 10
MIN_KEEPALIVE = 5


def pool_limits() -> httpx.Limits:
    """Connection limits from settings, raised to a floor the scheduler can share."""
    connections = max(MIN_CONNECTIONS, settings.supabase_http_max_connections)
    keepalive = min(connections, max(MIN_KEEPALIVE, settings.supabase_http_max_keepalive_connections))
    return httpx.Limits(max_connections=connections, max_keepalive_connections=keepalive)


def _store_options() -> SyncClientOptions:
    # Sessions are never used: every item request carries the service key.
    timeout = max(1, settings.supabase_postgrest_timeout_seconds)
    return SyncClientOptions(
        auto_refresh_token=False,
        persist_session=False,
        postgrest_client_timeout=timeout,
        httpx_client=httpx.Client(timeout=httpx.Timeout(timeout), limits=pool_limits()),
    )


@lru_cache(maxsize=1)
def get_items_client() -> Client:
    """Return the process-wide client behind ``SupabaseItemStore``."""
    return create_client(settings.supabase_url, settings.supabase_service_key, options=_store_options())
