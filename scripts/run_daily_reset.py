"""Run the daily settlement once, for one user or every auto-reset user."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Approve daily pending items, apply the bonus or fine and reset flags.",
    )
    parser.add_argument(
        "--user-id",
        type=str,
        default=None,
        help="Settle only this user, even if auto reset is off.",
    )
    parser.add_argument(
        "--reset-type",
        type=str,
        default="daily",
        choices=["daily", "weekly", "monthly"],
        help="Weekly and monthly only clear completion flags (default: daily).",
    )
    return parser.parse_args(argv)


def run(user_id: str | None, reset_type: str) -> dict:
    """Run one reset pass and return its summary as JSON-ready data."""
    from chorecoins.services.reset_service import ResetService
    from chorecoins.store import get_store

    service = ResetService(get_store())
    if reset_type == "daily":
        return service.run_daily_reset(user_id).model_dump(mode="json")
    if user_id:
        return service.reset_repeating(user_id, reset_type).model_dump(mode="json")
    return service.run_repeat_reset(reset_type).model_dump(mode="json")


def main(argv: list[str] | None = None) -> int:
    """CLI entry point; exits non-zero when any user or item failed."""
    args = parse_args(argv)
    summary = run(args.user_id, args.reset_type)
    print(json.dumps(summary, indent=2))
    return 1 if summary.get("errors") else 0


if __name__ == "__main__":
    sys.exit(main())
