"""Daily settlement scheduled job."""

from __future__ import annotations

import logging

from chorecoins.services.reset_service import ResetService
from chorecoins.store import get_store

logger = logging.getLogger(__name__)


async def daily_reset() -> None:
    """Settle and reset daily activities for every auto-reset user."""
    summary = ResetService(get_store()).run_daily_reset()
    logger.info(
        "daily_reset completed for %s users (%s approved, %s reset, %s errors)",
        summary.users_processed,
        summary.approved_activities,
        summary.reset_activities,
        summary.errors,
    )
