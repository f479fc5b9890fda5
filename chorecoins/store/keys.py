"""Partition and sort key layout for the single item collection."""

from __future__ import annotations

USER_PREFIX = "USER#"
METADATA = "METADATA"
BALANCE = "ACCOUNT#balance"
LOG_PREFIX = "BALANCELOG#"
PENDING_PREFIX = "PENDING#"
ACTIVITY_PREFIX = "ACTIVITY#"
BEHAVIOR_PREFIX = "BEHAVIOR#"
TODO_PREFIX = "TODO#"
ENTERTAINMENT_PREFIX = "ENTERTAINMENT#"

_GROUPED_ACTIVITY_MARKER = "#ACTIVITY#"


def user_pk(user_id: str) -> str:
    return f"{USER_PREFIX}{user_id}"


def user_id_from_pk(partition_key: str) -> str:
    return partition_key.removeprefix(USER_PREFIX)


def log_sk(log_id: str) -> str:
    return f"{LOG_PREFIX}{log_id}"


def pending_sk(pending_id: str) -> str:
    return f"{PENDING_PREFIX}{pending_id}"


def behavior_sk(behavior_id: str) -> str:
    return f"{BEHAVIOR_PREFIX}{behavior_id}"


def activity_sk(activity_id: str, behavior_id: str | None = None) -> str:
    """Standalone activities live under ``ACTIVITY#``; grouped ones under their behavior."""
    if behavior_id:
        return f"{BEHAVIOR_PREFIX}{behavior_id}{_GROUPED_ACTIVITY_MARKER}{activity_id}"
    return f"{ACTIVITY_PREFIX}{activity_id}"


def grouped_activity_prefix(behavior_id: str) -> str:
    return f"{BEHAVIOR_PREFIX}{behavior_id}{_GROUPED_ACTIVITY_MARKER}"


def is_activity_sk(sort_key: str) -> bool:
    return sort_key.startswith(ACTIVITY_PREFIX) or (
        sort_key.startswith(BEHAVIOR_PREFIX) and _GROUPED_ACTIVITY_MARKER in sort_key
    )


def is_behavior_sk(sort_key: str) -> bool:
    return sort_key.startswith(BEHAVIOR_PREFIX) and _GROUPED_ACTIVITY_MARKER not in sort_key


def todo_sk(todo_id: str) -> str:
    return f"{TODO_PREFIX}{todo_id}"


def entertainment_sk(entertainment_id: str) -> str:
    return f"{ENTERTAINMENT_PREFIX}{entertainment_id}"
