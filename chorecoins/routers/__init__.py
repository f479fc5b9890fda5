"""API router package."""

from chorecoins.routers import (
    activities,
    balance,
    behaviors,
    cron,
    entertainments,
    logs,
    pending,
    reset,
    todos,
    users,
)

__all__ = [
    "activities",
    "balance",
    "behaviors",
    "cron",
    "entertainments",
    "logs",
    "pending",
    "reset",
    "todos",
    "users",
]
