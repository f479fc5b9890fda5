"""User registration and settings tests."""

from __future__ import annotations

from decimal import Decimal

import pytest

from chorecoins.services.user_service import UserService
from chorecoins.utils.errors import ConflictError, InvalidInputError, NotFoundError


def test_register_creates_default_settings(store) -> None:
    service = UserService(store)
    account = service.register("kid-9", "  Nine ")

    assert account.username == "Nine"
    settings = service.get_settings("kid-9")
    assert settings.complete_award == Decimal("0.00")
    assert settings.uncomplete_fine == Decimal("0.00")
    assert settings.auto_reset is False


def test_register_twice_conflicts(store, user_id: str) -> None:
    with pytest.raises(ConflictError) as excinfo:
        UserService(store).register(user_id)
    assert excinfo.value.code == "USER_EXISTS"


def test_update_settings_is_partial(store, user_id: str) -> None:
    service = UserService(store)
    service.update_settings(user_id, complete_award="1.5", auto_reset=True)
    updated = service.update_settings(user_id, uncomplete_fine="0.25", complete_award=None)

    assert updated.complete_award == Decimal("1.50")
    assert updated.uncomplete_fine == Decimal("0.25")
    assert updated.auto_reset is True
    assert [account.user_id for account in service.list_auto_reset_users()] == [user_id]


@pytest.mark.parametrize(
    "changes",
    [{"complete_award": "-1"}, {"uncomplete_fine": "-0.01"}, {"bogus": 1}],
)
def test_update_settings_validation(store, user_id: str, changes: dict) -> None:
    with pytest.raises(InvalidInputError):
        UserService(store).update_settings(user_id, **changes)


def test_settings_for_unknown_user(store) -> None:
    with pytest.raises(NotFoundError):
        UserService(store).get_settings("ghost")


@pytest.mark.parametrize(
    ("stored", "expected"),
    [("false", False), ("False", False), ("true", True), ("1", True), (0, False), (None, False)],
)
def test_auto_reset_text_flags(store, stored: object, expected: bool) -> None:
    store.put(
        {
            "partition_key": "USER#kid-7",
            "sort_key": "METADATA",
            "user_id": "kid-7",
            "autoReset": stored,
        }
    )
    service = UserService(store)

    assert service.get_settings("kid-7").auto_reset is expected
    assert [account.user_id for account in service.list_auto_reset_users()] == (["kid-7"] if expected else [])
