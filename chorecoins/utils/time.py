"""Time utility helpers."""

from __future__ import annotations

import secrets
import threading
import time
from datetime import UTC, datetime

_stamp_lock = threading.Lock()
_last_stamp_us = 0


def now_utc() -> datetime:
    """Return current timezone-aware UTC datetime."""
    return datetime.now(tz=UTC)


def parse_iso_datetime(value: str | datetime | None) -> datetime | None:
    """Parse an ISO timestamp (accepting a trailing ``Z``) into an aware datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def next_stamp() -> tuple[str, str]:
    """Return a ``(token, iso_timestamp)`` pair that sorts in creation order.

    Tokens are the microsecond epoch (zero padded) plus a random suffix. The
    microsecond value is strictly increasing within the process, so two
    records created in the same microsecond still sort in call order.
    """
    global _last_stamp_us
    with _stamp_lock:
        current = time.time_ns() // 1000
        if current <= _last_stamp_us:
            current = _last_stamp_us + 1
        _last_stamp_us = current

    moment = datetime.fromtimestamp(current // 1_000_000, tz=UTC).replace(
        microsecond=current % 1_000_000
    )
    token = f"{current:017d}_{secrets.token_hex(4)}"
    return token, moment.isoformat(timespec="microseconds")
