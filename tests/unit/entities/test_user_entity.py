"""Tests for the lead entity and its input models."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from src.leadsite.entities.core.user import User, UserCreate, UserPatch, normalize_email


def make_user(**overrides) -> User:
    now = datetime.now(UTC)
    values = {
        "id": 1,
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "ada@example.com",
        "company": "Analytical Engines",
        "phone": "555-0100",
        "created_at": now,
        "updated_at": now,
    }
    values.update(overrides)
    return User(**values)


class TestUser:
    def test_full_name(self):
        assert make_user().full_name == "Ada Lovelace"

    def test_equality_ignores_timestamps(self):
        later = datetime(2030, 1, 1, tzinfo=UTC)
        assert make_user() == make_user(created_at=later, updated_at=later)
        assert make_user() != make_user(company="Other")
        assert make_user() != "ada@example.com"

    def test_hashable(self):
        assert len({make_user(), make_user()}) == 1


class TestUserCreate:
    def test_normalized(self):
        data = UserCreate(
            first_name=" Ada ",
            last_name="Lovelace ",
            email=" ADA@Example.com ",
            company=" AE ",
            phone=" 555 ",
        )

        assert data.normalized() == {
            "first_name": "Ada",
            "last_name": "Lovelace",
            "email": "ada@example.com",
            "company": "AE",
            "phone": "555",
            "message": "",
        }

    def test_required_fields_must_be_non_empty(self):
        with pytest.raises(ValidationError):
            UserCreate(first_name="", last_name="L", email="e@x.io", company="C", phone="1")


class TestUserPatch:
    def test_only_set_fields_are_written(self):
        assert UserPatch(phone=" 555-0199 ").to_values() == {"phone": "555-0199"}

    def test_none_and_blank_required_fields_are_skipped(self):
        assert UserPatch(first_name=None, company="   ").to_values() == {}

    def test_message_may_be_cleared(self):
        assert UserPatch(message="").to_values() == {"message": ""}

    def test_email_is_normalized(self):
        assert UserPatch(email=" X@Y.io").to_values() == {"email": "x@y.io"}


def test_normalize_email():
    assert normalize_email("  MiXeD@Example.ORG\t") == "mixed@example.org"
