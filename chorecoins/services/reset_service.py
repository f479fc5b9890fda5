"""Daily settlement and repeat-cycle resets.

``settle_daily`` is the single code path behind both the interactive
"run daily reset" action and the scheduled sweep; ``run_daily_reset`` only
decides which users it runs for.
"""

from __future__ import annotations

import logging
from typing import Any

from chorecoins.domain.activity import ActivityState, CompletionStatus, RepeatType
from chorecoins.domain.results import RepeatResetResult, ResetSummary
from chorecoins.domain.user import UserSettings
from chorecoins.services.activity_service import ActivityService
from chorecoins.services.ledger_service import LedgerService, user_lock
from chorecoins.services.settlement_service import APPROVED_PREFIX, SettlementService
from chorecoins.services.todo_service import TodoService
from chorecoins.services.user_service import UserService
from chorecoins.store.base import ItemStore
from chorecoins.utils.errors import AppError, InvalidInputError
from chorecoins.utils.money import format_money
from chorecoins.utils.time import now_utc

logger = logging.getLogger(__name__)

RESETTABLE = (RepeatType.DAILY, RepeatType.WEEKLY, RepeatType.MONTHLY)


def parse_reset_type(value: Any) -> RepeatType:
    try:
        repeat = RepeatType(value)
    except ValueError:
        repeat = None
    if repeat not in RESETTABLE:
        raise InvalidInputError("Valid reset type is required (daily, weekly, monthly)")
    return repeat


class ResetService:
    """Settle and reset repeating activities for one user or all opted-in users."""

    def __init__(self, store: ItemStore) -> None:
        self.users = UserService(store)
        self.ledger = LedgerService(store)
        self.activities = ActivityService(store)
        self.todos = TodoService(store)
        self.settlement = SettlementService(store)

    def settle_daily(self, user_id: str, user_settings: UserSettings | None = None) -> ResetSummary:
        """Run the end-of-day pass for one user.

        Pending items of repeating activities are approved, then the daily
        activities decide between the completion bonus and the per-activity
        fine, and finally every daily activity is reset.
        """
        if user_settings is None:
            user_settings = self.users.get_settings(user_id)
        summary = ResetSummary(timestamp=now_utc(), users_processed=1)

        with user_lock(user_id):
            repeating = self.activities.list_repeating(user_id)
            approval = self.settlement.approve_for_activities(
                user_id,
                [activity.activity_id for activity in repeating],
                reason_prefix=APPROVED_PREFIX,
            )
            summary.approved_activities += approval.processed
            summary.errors += approval.failed

            # Re-read so activities settled above show their post-approval state.
            daily = [
                activity
                for activity in self.activities.list_repeating(user_id)
                if activity.repeat is RepeatType.DAILY
            ]
            uncompleted = [
                activity
                for activity in daily
                if activity.completed is CompletionStatus.FALSE and activity.pending_quantity == 0
            ]
            logger.info(
                "Daily activities for %s: %s total, %s uncompleted",
                user_id,
                len(daily),
                len(uncompleted),
            )

            award = user_settings.complete_award
            fine = user_settings.uncomplete_fine
            if daily and not uncompleted and award > 0:
                try:
                    self.ledger.apply_delta(
                        user_id,
                        award,
                        f"Daily completion bonus: All {len(daily)} activities completed "
                        f"(+{format_money(award)})",
                    )
                    summary.completion_bonuses += 1
                except AppError:
                    logger.exception("Failed to apply completion bonus for %s", user_id)
                    summary.errors += 1
            elif uncompleted and fine > 0:
                total_fine = fine * len(uncompleted)
                try:
                    self.ledger.apply_delta(
                        user_id,
                        -total_fine,
                        f"Daily incomplete fine: {len(uncompleted)} activities not completed "
                        f"({format_money(fine)} per activity = {format_money(total_fine)} total)",
                    )
                    summary.incomplete_fines += 1
                except AppError:
                    logger.exception("Failed to apply incomplete fine for %s", user_id)
                    summary.errors += 1

            reset = self.reset_repeating(user_id, RepeatType.DAILY)
            summary.reset_activities += reset.reset_activities
            summary.errors += reset.errors

        return summary

    def run_daily_reset(self, user_id: str | None = None) -> ResetSummary:
        """Settle one user (manual path) or every auto-reset user (scheduled path).

        Failures are counted in ``errors``; nothing is raised past the user
        lookup of the manual path.
        """
        summary = ResetSummary(timestamp=now_utc())
        if user_id is not None:
            accounts = [self.users.get_user(user_id)]
        else:
            accounts = self.users.list_auto_reset_users()
            summary.users_with_auto_reset = len(accounts)
            if not accounts:
                logger.info("No users have auto_reset enabled, skipping reset")
                return summary

        for account in accounts:
            try:
                summary.merge(self.settle_daily(account.user_id, account.settings))
            except AppError:
                logger.exception("Daily reset failed for user %s", account.user_id)
                summary.errors += 1

        logger.info("Daily reset completed: %s", summary.model_dump(mode="json"))
        return summary

    def reset_repeating(self, user_id: str, reset_type: Any) -> RepeatResetResult:
        """Clear completion flags of activities and todos with a given repeat type.

        Items still awaiting approval keep their flags and their pending reward;
        they are counted in ``skipped`` and reset on a later run once decided.
        """
        repeat = parse_reset_type(reset_type)
        now = now_utc()
        result = RepeatResetResult(reset_type=repeat.value)

        with user_lock(user_id):
            for activity in self.activities.list_activities(user_id):
                if activity.repeat is not repeat:
                    continue
                if activity.state is ActivityState.AWAITING_APPROVAL:
                    logger.warning("Skipping reset of activity %s awaiting approval", activity.activity_id)
                    result.skipped += 1
                    continue
                try:
                    self.activities.store.put(activity.reset(now).to_item())
                    result.reset_activities += 1
                except AppError:
                    logger.exception("Failed to reset activity %s", activity.activity_id)
                    result.errors += 1

            for todo in self.todos.list_todos(user_id):
                if todo.repeat is not repeat:
                    continue
                if todo.completed is CompletionStatus.PENDING:
                    logger.warning("Skipping reset of todo %s awaiting approval", todo.todo_id)
                    result.skipped += 1
                    continue
                try:
                    self.todos.store.put(todo.reset(now).to_item())
                    result.reset_todos += 1
                except AppError:
                    logger.exception("Failed to reset todo %s", todo.todo_id)
                    result.errors += 1

        logger.info(
            "Reset %s %s activities and %s todos for %s (%s awaiting approval)",
            result.reset_activities,
            repeat.value,
            result.reset_todos,
            user_id,
            result.skipped,
        )
        return result

    def preview_reset(self, user_id: str, reset_type: Any) -> list[dict[str, Any]]:
        """List activities and todos of ``reset_type`` that a reset would clear."""
        repeat = parse_reset_type(reset_type)
        preview: list[dict[str, Any]] = []
        for activity in self.activities.list_activities(user_id):
            if activity.repeat is repeat and activity.completed is CompletionStatus.TRUE:
                preview.append({"kind": "activity", "id": activity.activity_id, "name": activity.name})
        for todo in self.todos.list_todos(user_id):
            if todo.repeat is repeat and todo.completed is CompletionStatus.TRUE:
                preview.append({"kind": "todo", "id": todo.todo_id, "name": todo.text})
        return preview

    def run_repeat_reset(self, reset_type: Any) -> RepeatResetResult:
        """Reset ``reset_type`` flags for every auto-reset user (weekly/monthly jobs)."""
        repeat = parse_reset_type(reset_type)
        total = RepeatResetResult(reset_type=repeat.value)
        for account in self.users.list_auto_reset_users():
            try:
                result = self.reset_repeating(account.user_id, repeat)
            except AppError:
                logger.exception("%s reset failed for user %s", repeat.value, account.user_id)
                total.errors += 1
                continue
            total.reset_activities += result.reset_activities
            total.reset_todos += result.reset_todos
            total.skipped += result.skipped
            total.errors += result.errors
        return total
