"""Tests for user-id resolution from sharing metadata."""

from recipe_importer.domain.user_data import UserDataSnapshot
from recipe_importer.services.identity import resolve_user_id
from tests.conftest import FakeListServiceClient


def _snapshot(client: FakeListServiceClient) -> UserDataSnapshot:
    return UserDataSnapshot.model_validate(client.user_data())


def test_resolve_user_id_matches_email_case_insensitively() -> None:
    snapshot = _snapshot(FakeListServiceClient())

    assert resolve_user_id(snapshot, "  Cook@Example.COM ") == "user-42"


def test_resolve_user_id_returns_none_without_match() -> None:
    snapshot = _snapshot(FakeListServiceClient())

    assert resolve_user_id(snapshot, "stranger@example.com") is None


def test_resolve_user_id_returns_none_without_lists() -> None:
    snapshot = UserDataSnapshot.model_validate({})

    assert resolve_user_id(snapshot, "cook@example.com") is None


def test_resolve_user_id_only_scans_first_list() -> None:
    raw = FakeListServiceClient(shared_users=[]).user_data()
    raw["shoppingListsResponse"]["newLists"].append(  # type: ignore[index]
        {
            "identifier": "list-2",
            "sharedUsers": [{"email": "cook@example.com", "userId": "user-42"}],
        }
    )

    snapshot = UserDataSnapshot.model_validate(raw)

    assert resolve_user_id(snapshot, "cook@example.com") is None


def test_resolve_user_id_is_stable_for_same_snapshot() -> None:
    snapshot = _snapshot(FakeListServiceClient())

    first = resolve_user_id(snapshot, "cook@example.com")
    second = resolve_user_id(snapshot, "cook@example.com")

    assert first == second == "user-42"
