"""Domain records for the coin ledger, pending queue and completion tracking."""

from chorecoins.domain.activity import Activity, ActivityState, CompletionStatus, RepeatType
from chorecoins.domain.behavior import Behavior
from chorecoins.domain.entertainment import Entertainment
from chorecoins.domain.ledger import BalanceChange, BalanceLogEntry, normalize_logs
from chorecoins.domain.pending import PendingReward, PendingType
from chorecoins.domain.results import (
    BackupResult,
    BatchResult,
    PurchaseResult,
    PurgeResult,
    RepeatResetResult,
    ResetSummary,
)
from chorecoins.domain.todo import Todo
from chorecoins.domain.user import UserAccount, UserSettings

__all__ = [
    "Activity",
    "ActivityState",
    "BackupResult",
    "BalanceChange",
    "BalanceLogEntry",
    "BatchResult",
    "Behavior",
    "CompletionStatus",
    "Entertainment",
    "PendingReward",
    "PendingType",
    "PurchaseResult",
    "PurgeResult",
    "RepeatResetResult",
    "ResetSummary",
    "Todo",
    "UserAccount",
    "UserSettings",
    "normalize_logs",
]
