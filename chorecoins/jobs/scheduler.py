"""APScheduler setup and job registration."""

from __future__ import annotations

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from chorecoins.config import settings
from chorecoins.jobs.daily_reset import daily_reset
from chorecoins.jobs.repeat_reset import monthly_reset, weekly_reset

scheduler = AsyncIOScheduler(timezone=settings.timezone)


def register_jobs() -> None:
    """Register all periodic jobs if not already present."""
    if scheduler.get_job("daily_reset") is None:
        scheduler.add_job(
            daily_reset,
            CronTrigger(
                hour=settings.daily_reset_hour,
                minute=settings.daily_reset_minute,
                timezone=settings.timezone,
            ),
            id="daily_reset",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )

    if scheduler.get_job("weekly_reset") is None:
        scheduler.add_job(
            weekly_reset,
            CronTrigger(day_of_week="mon", hour=0, minute=0, timezone=settings.timezone),
            id="weekly_reset",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )

    if scheduler.get_job("monthly_reset") is None:
        scheduler.add_job(
            monthly_reset,
            CronTrigger(day=1, hour=0, minute=0, timezone=settings.timezone),
            id="monthly_reset",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
