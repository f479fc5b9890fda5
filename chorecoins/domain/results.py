"""Summaries returned by batch and restore operations."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from chorecoins.utils.money import ZERO, Money


class BatchResult(BaseModel):
    """Outcome of approve-all / deny-all; ``failed > 0`` means a partial failure."""

    processed: int = 0
    failed: int = 0
    total_amount: Money = ZERO
    balance: Money | None = None

    @property
    def succeeded(self) -> bool:
        return self.failed == 0


class ResetSummary(BaseModel):
    """Counters for one daily reset run, aggregated across users."""

    timestamp: datetime
    users_with_auto_reset: int = 0
    users_processed: int = 0
    approved_activities: int = 0
    reset_activities: int = 0
    completion_bonuses: int = 0
    incomplete_fines: int = 0
    errors: int = 0

    def merge(self, other: ResetSummary) -> None:
        self.users_processed += other.users_processed
        self.approved_activities += other.approved_activities
        self.reset_activities += other.reset_activities
        self.completion_bonuses += other.completion_bonuses
        self.incomplete_fines += other.incomplete_fines
        self.errors += other.errors


class RepeatResetResult(BaseModel):
    reset_type: str
    reset_activities: int = 0
    reset_todos: int = 0
    skipped: int = 0
    errors: int = 0

    @property
    def reset_count(self) -> int:
        return self.reset_activities + self.reset_todos


class BackupResult(BaseModel):
    target_log_id: str
    deleted_count: int
    error_count: int = 0
    balance_before: Money
    balance_after: Money
    log_id: str


class PurgeResult(BaseModel):
    total_found: int
    deleted_count: int
    error_count: int = 0


class PurchaseResult(BaseModel):
    pending_id: str
    total_minutes: int
    total_cost: Money
    message: str = Field(default="")
