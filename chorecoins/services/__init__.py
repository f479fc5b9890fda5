"""Service package exports with lazy loading."""

from __future__ import annotations

from importlib import import_module
from typing import Any

_EXPORTS = {
    "ActivityService": "chorecoins.services.activity_service",
    "BehaviorService": "chorecoins.services.behavior_service",
    "EntertainmentService": "chorecoins.services.entertainment_service",
    "LedgerService": "chorecoins.services.ledger_service",
    "PendingRewardService": "chorecoins.services.pending_service",
    "ResetService": "chorecoins.services.reset_service",
    "SettlementService": "chorecoins.services.settlement_service",
    "TodoService": "chorecoins.services.todo_service",
    "UserService": "chorecoins.services.user_service",
}

__all__ = sorted(_EXPORTS.keys())


def __getattr__(name: str) -> Any:
    if name not in _EXPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module = import_module(_EXPORTS[name])
    return getattr(module, name)
