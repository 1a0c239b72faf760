"""Tests for the User value object and the static user registry"""

import dataclasses

import pytest

from pruefungsplaner_auth.models import Configuration, User
from pruefungsplaner_auth.users import UserRegistry


@pytest.fixture
def registry():
    return UserRegistry(
        [
            User("alice", "alice-secret", ("admin", "planner")),
            User("bob", "bob-secret", ()),
            User("alice", "second-alice", ("viewer",)),
        ]
    )


class TestUserRegistryLookup:
    def test_lookup_returns_configured_user(self, registry):
        user = registry.lookup("bob")

        assert user.name == "bob"
        assert user.password_record == "bob-secret"
        assert user.claims == ()

    def test_first_match_wins_for_duplicate_names(self, registry):
        user = registry.lookup("alice")

        assert user.password_record == "alice-secret"
        assert user.claims == ("admin", "planner")

    def test_duplicates_are_all_stored(self, registry):
        assert registry.names() == ["alice", "bob", "alice"]
        assert len(registry) == 3

    @pytest.mark.parametrize(
        "users",
        [[], [User("alice", "x", ("admin",))], [User("", "", ())]],
    )
    def test_unknown_user_has_no_password_and_no_claims(self, users):
        user = UserRegistry(users).lookup("nonexistent")

        assert user.name == "nonexistent"
        assert user.password_record == ""
        assert user.claims == ()

    def test_unknown_user_is_not_added(self, registry):
        registry.lookup("mallory")

        assert "mallory" not in registry.names()
        assert len(registry) == 3

    def test_lookup_is_case_sensitive(self, registry):
        assert registry.lookup("ALICE").password_record == ""


class TestUser:
    def test_check_password(self):
        user = User("alice", "alice-secret", ())

        assert user.check_password("alice-secret") is True
        assert user.check_password("wrong") is False

    def test_unknown_user_password_check_always_fails(self):
        user = User.unknown("ghost")

        assert user.check_password("") is False
        assert user.check_password("anything") is False
        assert user.claims == ()

    def test_has_claim(self):
        user = User("alice", "x", ("admin",))

        assert user.has_claim("admin")
        assert not user.has_claim("planner")

    def test_user_is_immutable(self):
        user = User("alice", "x", ())

        with pytest.raises(dataclasses.FrozenInstanceError):
            user.name = "bob"  # type: ignore[misc]


def test_configuration_get_user_delegates_to_registry(registry):
    configuration = Configuration(
        address="127.0.0.1",
        port=8080,
        private_key_pem="PRIVATE-PEM-TEXT",
        public_key_pem="public",
        users=registry,
    )

    assert configuration.get_user("bob").password_record == "bob-secret"
    assert configuration.get_user("nobody").password_record == ""
    assert "PRIVATE-PEM-TEXT" not in repr(configuration)
