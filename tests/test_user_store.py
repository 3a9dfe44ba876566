"""
Tests for UserStore against a real (SQLite) database.
"""

import pytest
from sqlalchemy.exc import IntegrityError

from database.users import UniqueViolation, UserStore, _violated_field


class TestCreate:
    async def test_normalizes_and_assigns_id(self, db):
        store = UserStore(db)
        user = await store.create("  alice  ", "  A@Example.com ", "hash-value")
        assert user.id is not None
        assert user.username == "alice"
        assert user.email == "a@example.com"
        assert user.password_hash == "hash-value"
        assert user.created_at is not None
        assert user.updated_at is not None

    async def test_ids_are_unique(self, db):
        store = UserStore(db)
        first = await store.create("alice", "alice@example.com", "h1")
        second = await store.create("bob", "bob@example.com", "h2")
        assert first.id != second.id

    async def test_duplicate_email_is_unique_violation(self, db):
        store = UserStore(db)
        await store.create("alice", "alice@example.com", "h1")
        with pytest.raises(UniqueViolation) as exc_info:
            await store.create("bob", "ALICE@example.com", "h2")
        assert exc_info.value.field == "email"

    async def test_duplicate_username_is_unique_violation(self, db):
        store = UserStore(db)
        await store.create("alice", "alice@example.com", "h1")
        with pytest.raises(UniqueViolation) as exc_info:
            await store.create("alice", "other@example.com", "h2")
        assert exc_info.value.field == "username"

    async def test_session_usable_after_violation(self, db):
        store = UserStore(db)
        await store.create("alice", "alice@example.com", "h1")
        with pytest.raises(UniqueViolation):
            await store.create("alice", "other@example.com", "h2")
        bob = await store.create("bob", "bob@example.com", "h3")
        assert bob.username == "bob"


class TestFind:
    async def test_find_by_email_matches_stored_form(self, db):
        store = UserStore(db)
        created = await store.create("alice", "alice@example.com", "h1")
        found = await store.find_by_email(" Alice@Example.COM ")
        assert found is not None
        assert found.id == created.id

    async def test_find_by_email_missing(self, db):
        assert await UserStore(db).find_by_email("nobody@example.com") is None

    async def test_find_by_email_or_username(self, db):
        store = UserStore(db)
        alice = await store.create("alice", "alice@example.com", "h1")
        by_email = await store.find_by_email_or_username("ALICE@example.com", "someone")
        by_name = await store.find_by_email_or_username("new@example.com", "alice")
        assert by_email.id == alice.id
        assert by_name.id == alice.id
        assert await store.find_by_email_or_username("new@example.com", "bob") is None


class TestViolatedField:
    @pytest.mark.parametrize(
        "driver_message, field",
        [
            ("UNIQUE constraint failed: users.email", "email"),
            ("UNIQUE constraint failed: users.username", "username"),
            ('duplicate key value violates unique constraint "uq_users_email"', "email"),
            ('duplicate key value violates unique constraint "uq_users_username"', "username"),
        ],
    )
    def test_field_from_driver_message(self, driver_message, field):
        exc = IntegrityError("INSERT INTO users ...", {}, Exception(driver_message))
        assert _violated_field(exc) == field

    def test_unrelated_integrity_error(self):
        exc = IntegrityError("INSERT INTO users ...", {}, Exception("NOT NULL constraint failed: users.id"))
        assert _violated_field(exc) is None
