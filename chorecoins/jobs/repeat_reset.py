"""Weekly and monthly completion flag resets."""

from __future__ import annotations

import logging

from chorecoins.domain.activity import RepeatType
from chorecoins.services.reset_service import ResetService
from chorecoins.store import get_store

logger = logging.getLogger(__name__)


def _run(repeat: RepeatType) -> None:
    result = ResetService(get_store()).run_repeat_reset(repeat)
    logger.info(
        "%s_reset completed: %s activities, %s todos, %s errors",
        repeat.value,
        result.reset_activities,
        result.reset_todos,
        result.errors,
    )


async def weekly_reset() -> None:
    """Clear weekly activity and todo flags for auto-reset users."""
    _run(RepeatType.WEEKLY)


async def monthly_reset() -> None:
    _run(RepeatType.MONTHLY)
