"""Tests for name + PIN identity resolution."""

from __future__ import annotations

import pytest

from studyhabits.errors import InvalidCredential, InvalidInput
from studyhabits.infra.repositories import RosterRepository
from studyhabits.services import auth


def test_hash_and_verify_round_trip():
    digest = auth.hash_secret("1234")
    assert digest != "1234"
    assert auth.verify_secret(digest, "1234")
    assert not auth.verify_secret(digest, "4321")


def test_verify_secret_rejects_empty_or_foreign_hash():
    assert not auth.verify_secret("", "1234")
    assert not auth.verify_secret("not-an-argon2-hash", "1234")


def test_first_entry_creates_user_and_roster_entry(users, roster):
    result = auth.resolve_identity(name="  Ana ", secret="1234", users=users, roster=roster)

    assert result.created
    profile = result.profile
    assert profile.name == "Ana"
    assert profile.points == 0
    assert profile.xp == 0
    assert profile.level == 1
    assert profile.overall_streak == 0
    assert profile.last_active is None
    assert profile.habits == []
    assert users.get("Ana") is not None
    assert roster.get().names == ["Ana"]


def test_returning_user_verified(users, roster):
    auth.resolve_identity(name="Ana", secret="1234", users=users, roster=roster)

    result = auth.resolve_identity(name="Ana", secret="1234", users=users, roster=roster)

    assert not result.created
    assert result.profile.name == "Ana"
    assert roster.get().names == ["Ana"]


def test_wrong_secret_rejected_without_writes(users, roster, store):
    auth.resolve_identity(name="Ana", secret="1234", users=users, roster=roster)
    before = store.get_document("users", "Ana")
    roster_before = store.get_document("meta", "roster")

    with pytest.raises(InvalidCredential):
        auth.resolve_identity(name="Ana", secret="9999", users=users, roster=roster)

    assert store.get_document("users", "Ana") == before
    assert store.get_document("meta", "roster") == roster_before


@pytest.mark.parametrize("name, secret", [("", "1234"), ("   ", "1234"), ("Ana", "")])
def test_empty_name_or_secret(users, roster, name, secret):
    with pytest.raises(InvalidInput):
        auth.resolve_identity(name=name, secret=secret, users=users, roster=roster)
    assert roster.get().names == []


def test_names_are_case_sensitive(users, roster):
    auth.resolve_identity(name="ana", secret="1", users=users, roster=roster)
    result = auth.resolve_identity(name="Ana", secret="2", users=users, roster=roster)
    assert result.created
    assert roster.get().names == ["ana", "Ana"]


def test_full_roster_still_creates_user(store, users):
    small_roster = RosterRepository(store, limit=2)
    for name in ("A", "B", "C"):
        auth.resolve_identity(name=name, secret="1", users=users, roster=small_roster)

    assert small_roster.get().names == ["A", "B"]
    assert users.get("C") is not None


def test_credential_never_stored_in_plain_text(users, roster, store):
    auth.resolve_identity(name="Ana", secret="1234", users=users, roster=roster)
    stored = store.get_document("users", "Ana").data
    assert "1234" not in str(stored)
    assert stored["credentialHash"].startswith("$argon2")
