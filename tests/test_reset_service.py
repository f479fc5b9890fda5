"""Daily settlement and repeat reset tests."""

from __future__ import annotations

from decimal import Decimal

import pytest

from chorecoins.domain.activity import CompletionStatus, RepeatType
from chorecoins.services.activity_service import ActivityService
from chorecoins.services.behavior_service import BehaviorService
from chorecoins.services.ledger_service import LedgerService
from chorecoins.services.pending_service import PendingRewardService
from chorecoins.services.reset_service import ResetService
from chorecoins.services.settlement_service import SettlementService
from chorecoins.services.todo_service import TodoService
from chorecoins.services.user_service import UserService
from chorecoins.utils.errors import InvalidInputError, NotFoundError


def _daily(activities: ActivityService, user_id: str, count: int, **kwargs: object) -> list:
    return [
        activities.create(user_id, f"Chore {n}", "1.00", repeat=RepeatType.DAILY, **kwargs)
        for n in range(count)
    ]


def test_daily_reset_fines_untouched_activities(
    store,
    activities: ActivityService,
    settlement: SettlementService,
    pending: PendingRewardService,
    ledger: LedgerService,
    resets: ResetService,
    user_id: str,
) -> None:
    """Two approved and one untouched daily activity cost exactly one fine."""
    UserService(store).update_settings(user_id, uncomplete_fine="0.50", complete_award="2.00")
    chores = _daily(activities, user_id, 3)
    for chore in chores[:2]:
        activities.change_pending_quantity(user_id, chore.activity_id, 1)
    settlement.approve_all(user_id)
    balance_before = ledger.get_balance(user_id)

    summary = resets.run_daily_reset(user_id)

    assert ledger.get_balance(user_id) == balance_before - Decimal("0.50")
    assert summary.incomplete_fines == 1
    assert summary.completion_bonuses == 0
    assert summary.reset_activities == 3
    assert summary.errors == 0
    for chore in activities.list_activities(user_id):
        assert (chore.completed, chore.pending_quantity) == (CompletionStatus.FALSE, 0)
        assert chore.last_reset_at is not None
    assert ledger.list_logs(user_id)[0].reason == (
        "Daily incomplete fine: 1 activities not completed ($0.50 per activity = $0.50 total)"
    )


def test_daily_reset_approves_pending_then_awards_bonus(
    store,
    activities: ActivityService,
    pending: PendingRewardService,
    ledger: LedgerService,
    resets: ResetService,
    user_id: str,
) -> None:
    """Pending daily items are settled first, so the day counts as complete."""
    UserService(store).update_settings(user_id, complete_award="1.00", uncomplete_fine="0.50")
    behavior = BehaviorService(store).create(user_id, "Morning")
    chores = _daily(activities, user_id, 1) + _daily(
        activities, user_id, 1, behavior_id=behavior.behavior_id
    )
    for chore in chores:
        activities.change_pending_quantity(user_id, chore.activity_id, 1)

    summary = resets.run_daily_reset(user_id)

    assert summary.approved_activities == 2
    assert summary.completion_bonuses == 1
    assert summary.incomplete_fines == 0
    assert ledger.get_balance(user_id) == Decimal("3.00")
    reasons = [entry.reason for entry in reversed(ledger.list_logs(user_id))]
    assert reasons[0].startswith("Approved: Completed")
    assert reasons[-1] == "Daily completion bonus: All 2 activities completed (+$1.00)"
    assert pending.list_pending(user_id) == []


def test_daily_reset_only_settles_repeating_activity_items(
    store,
    activities: ActivityService,
    pending: PendingRewardService,
    resets: ResetService,
    user_id: str,
) -> None:
    one_off = activities.create(user_id, "Wash car", "3.00")
    activities.change_pending_quantity(user_id, one_off.activity_id, 1)
    pending.propose(user_id, "-2.00", "Bought a comic")

    summary = resets.run_daily_reset(user_id)

    assert summary.approved_activities == 0
    assert len(pending.list_pending(user_id)) == 2


def test_daily_reset_without_daily_activities_applies_nothing(
    store, ledger: LedgerService, resets: ResetService, user_id: str
) -> None:
    UserService(store).update_settings(user_id, complete_award="1.00", uncomplete_fine="1.00")

    summary = resets.run_daily_reset(user_id)

    assert summary.completion_bonuses == summary.incomplete_fines == 0
    assert ledger.list_logs(user_id) == []


def test_scheduled_reset_only_runs_for_auto_reset_users(
    store, activities: ActivityService, ledger: LedgerService, resets: ResetService
) -> None:
    users = UserService(store)
    for user, auto in (("kid-a", True), ("kid-b", False)):
        users.register(user)
        users.update_settings(user, uncomplete_fine="1.00", auto_reset=auto)
        _daily(activities, user, 2)

    summary = resets.run_daily_reset()

    assert summary.users_with_auto_reset == 1
    assert summary.users_processed == 1
    assert ledger.get_balance("kid-a") == Decimal("-2.00")
    assert ledger.get_balance("kid-b") == Decimal("0.00")


def test_scheduled_reset_counts_failing_users(
    store, activities: ActivityService, resets: ResetService
) -> None:
    users = UserService(store)
    for user in ("kid-a", "kid-b"):
        users.register(user)
        users.update_settings(user, auto_reset=True)
    broken = activities.create("kid-a", "Broken", "1.00", repeat=RepeatType.DAILY)
    store.update("USER#kid-a", broken.sort_key, {"completed": "true", "pending_quantity": 4})
    _daily(activities, "kid-b", 1)

    summary = resets.run_daily_reset()

    assert summary.errors == 1
    assert summary.users_processed == 1
    assert summary.reset_activities == 1


def test_manual_reset_for_unknown_user(resets: ResetService) -> None:
    with pytest.raises(NotFoundError):
        resets.run_daily_reset("ghost")


def test_weekly_reset_clears_activities_and_todos(
    store, activities: ActivityService, todos: TodoService, resets: ResetService, user_id: str
) -> None:
    weekly = activities.create(user_id, "Vacuum", "2.00", repeat=RepeatType.WEEKLY)
    store.update(f"USER#{user_id}", weekly.sort_key, {"completed": "true"})
    daily = activities.create(user_id, "Dishes", "1.00", repeat=RepeatType.DAILY)
    store.update(f"USER#{user_id}", daily.sort_key, {"completed": "true"})
    todo = todos.create(user_id, "Bins out", "1.00", repeat=RepeatType.WEEKLY)
    store.update(f"USER#{user_id}", f"TODO#{todo.todo_id}", {"completed": "true"})

    preview = resets.preview_reset(user_id, "weekly")
    result = resets.reset_repeating(user_id, "weekly")

    assert {item["id"] for item in preview} == {weekly.activity_id, todo.todo_id}
    assert (result.reset_activities, result.reset_todos, result.reset_count) == (1, 1, 2)
    assert activities.get(user_id, weekly.activity_id).completed is CompletionStatus.FALSE
    assert activities.get(user_id, daily.activity_id).completed is CompletionStatus.TRUE
    assert todos.get(user_id, todo.todo_id).completed is CompletionStatus.FALSE


def test_reset_keeps_items_awaiting_approval(
    activities: ActivityService,
    todos: TodoService,
    pending: PendingRewardService,
    resets: ResetService,
    user_id: str,
) -> None:
    """Queued completions survive a reset and keep adding up afterwards."""
    reading = activities.create(user_id, "Read", "1.00", repeat=RepeatType.WEEKLY)
    activities.change_pending_quantity(user_id, reading.activity_id, 1)
    activities.change_pending_quantity(user_id, reading.activity_id, 1)
    bins = todos.create(user_id, "Bins out", "0.50", repeat=RepeatType.WEEKLY)
    todos.mark_done(user_id, bins.todo_id)

    preview = resets.preview_reset(user_id, "weekly")
    result = resets.reset_repeating(user_id, "weekly")

    assert preview == []
    assert (result.reset_count, result.skipped, result.errors) == (0, 2, 0)
    kept = activities.get(user_id, reading.activity_id)
    assert (kept.pending_quantity, kept.completed) == (2, CompletionStatus.PENDING)
    assert todos.get(user_id, bins.todo_id).completed is CompletionStatus.PENDING

    activities.change_pending_quantity(user_id, reading.activity_id, 1)

    amounts = sorted(item.amount for item in pending.list_pending(user_id))
    assert amounts == [Decimal("0.50"), Decimal("3.00")]


@pytest.mark.parametrize("reset_type", ["none", "once", "yearly", ""])
def test_reset_rejects_unknown_types(resets: ResetService, user_id: str, reset_type: str) -> None:
    with pytest.raises(InvalidInputError):
        resets.reset_repeating(user_id, reset_type)


def test_repeat_reset_for_auto_reset_users(store, activities: ActivityService, resets: ResetService) -> None:
    users = UserService(store)
    users.register("kid-a")
    users.update_settings("kid-a", auto_reset=True)
    monthly = activities.create("kid-a", "Clean fridge", "5.00", repeat=RepeatType.MONTHLY)
    store.update("USER#kid-a", monthly.sort_key, {"completed": "true"})

    result = resets.run_repeat_reset(RepeatType.MONTHLY)

    assert result.reset_activities == 1
    assert activities.get("kid-a", monthly.activity_id).completed is CompletionStatus.FALSE
