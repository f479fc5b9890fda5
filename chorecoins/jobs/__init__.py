"""Background job modules for periodic chore coin tasks."""

from chorecoins.jobs.daily_reset import daily_reset
from chorecoins.jobs.repeat_reset import monthly_reset, weekly_reset

__all__ = [
    "daily_reset",
    "monthly_reset",
    "weekly_reset",
]
