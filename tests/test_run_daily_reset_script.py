"""CLI reset script tests."""

from __future__ import annotations

import importlib.util
import json
from pathlib import Path

import pytest

from chorecoins.services.user_service import UserService
from chorecoins.store import get_store

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "run_daily_reset.py"


def _load_script():
    spec = importlib.util.spec_from_file_location("run_daily_reset", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_script_settles_one_user(capsys: pytest.CaptureFixture[str]) -> None:
    """The script runs against the configured (memory) store and prints JSON."""
    UserService(get_store()).register("cli-kid")
    script = _load_script()

    exit_code = script.main(["--user-id", "cli-kid"])

    summary = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert summary["users_processed"] == 1
    assert summary["errors"] == 0


def test_script_rejects_unknown_reset_type() -> None:
    with pytest.raises(SystemExit):
        _load_script().parse_args(["--reset-type", "yearly"])
