"""
FitTrack Backend — User Store & Password Hash Tests
=====================================================

What:  Tests for PasswordHash and UserStore (create, lookup, update).
How:   Real SQLite database; bcrypt at its minimum cost.

What we test:
    ✅ PasswordHash set/matches, wrong password → False, unset → ValueError
    ✅ Create then look up by username
    ✅ Unknown username → None
    ✅ Update by id; unknown id → NoRowsAffectedError, table unchanged
    ✅ Duplicate username → ConflictError
"""

import pytest

from fittrack.domain.user import PasswordHash, User
from fittrack.exceptions import ConflictError, NoRowsAffectedError, ValidationError
from fittrack.models.user import UserRow

# bcrypt minimum cost
TEST_HASH_ROUNDS = 4


def make_user(username: str = "alice", email: str = "alice@example.com") -> User:
    return User(
        username=username,
        email=email,
        password_hash=PasswordHash.from_plaintext("correct horse", rounds=TEST_HASH_ROUNDS),
        bio="Lifts things",
    )


class TestPasswordHash:
    """Tests for the PasswordHash value type."""

    def test_matches_correct_password(self):
        password = PasswordHash.from_plaintext("s3cret!", rounds=TEST_HASH_ROUNDS)
        assert password.matches("s3cret!") is True

    def test_wrong_password_is_false_not_error(self):
        password = PasswordHash.from_plaintext("s3cret!", rounds=TEST_HASH_ROUNDS)
        assert password.matches("guess") is False

    def test_hash_is_not_plaintext(self):
        password = PasswordHash.from_plaintext("s3cret!", rounds=TEST_HASH_ROUNDS)
        assert b"s3cret!" not in password.hash
        assert password.hash.startswith(b"$2")

    def test_same_password_hashes_differently(self):
        """bcrypt salts every hash."""
        first = PasswordHash.from_plaintext("same", rounds=TEST_HASH_ROUNDS)
        second = PasswordHash.from_plaintext("same", rounds=TEST_HASH_ROUNDS)
        assert first != second
        assert second.matches("same")

    def test_matches_without_hash_raises(self):
        with pytest.raises(ValueError):
            PasswordHash().matches("anything")

    def test_empty_password_rejected(self):
        with pytest.raises(ValueError):
            PasswordHash().set("", rounds=TEST_HASH_ROUNDS)

    def test_over_72_bytes_rejected(self):
        with pytest.raises(ValueError):
            PasswordHash().set("x" * 73, rounds=TEST_HASH_ROUNDS)

    def test_repr_hides_hash(self):
        password = PasswordHash.from_plaintext("s3cret!", rounds=TEST_HASH_ROUNDS)
        assert repr(password) == "PasswordHash(<set>)"


class TestCreateAndLookup:
    """Tests for create_user and get_user_by_username."""

    @pytest.mark.asyncio
    async def test_create_then_lookup(self, user_store):
        created = await user_store.create_user(make_user())

        assert created.id is not None
        assert created.created_at is not None

        loaded = await user_store.get_user_by_username("alice")
        assert loaded.id == created.id
        assert loaded.email == "alice@example.com"
        assert loaded.bio == "Lifts things"
        assert loaded.password_hash.matches("correct horse")

    @pytest.mark.asyncio
    async def test_unknown_username_returns_none(self, user_store):
        assert await user_store.get_user_by_username("nobody") is None

    @pytest.mark.asyncio
    async def test_unset_password_rejected(self, user_store, count_rows):
        with pytest.raises(ValidationError):
            await user_store.create_user(User(username="bob", email="bob@example.com"))

        assert await count_rows(UserRow) == 0

    @pytest.mark.asyncio
    async def test_duplicate_username_conflicts(self, user_store, count_rows):
        await user_store.create_user(make_user())

        with pytest.raises(ConflictError):
            await user_store.create_user(make_user(email="other@example.com"))

        assert await count_rows(UserRow) == 1


class TestUpdateUser:
    """Tests for update_user."""

    @pytest.mark.asyncio
    async def test_update_changes_only_target_row(self, user_store):
        alice = await user_store.create_user(make_user())
        await user_store.create_user(make_user("bob", "bob@example.com"))

        alice.email = "alice@new.example.com"
        alice.bio = "Runs now"
        updated = await user_store.update_user(alice)

        assert updated.updated_at is not None
        loaded = await user_store.get_user_by_username("alice")
        assert loaded.email == "alice@new.example.com"
        assert loaded.bio == "Runs now"
        bob = await user_store.get_user_by_username("bob")
        assert bob.email == "bob@example.com"

    @pytest.mark.asyncio
    async def test_rename_user(self, user_store):
        alice = await user_store.create_user(make_user())

        alice.username = "alicia"
        await user_store.update_user(alice)

        assert await user_store.get_user_by_username("alice") is None
        assert (await user_store.get_user_by_username("alicia")).id == alice.id

    @pytest.mark.asyncio
    async def test_update_unknown_id_raises_and_changes_nothing(self, user_store):
        await user_store.create_user(make_user())

        ghost = make_user("ghost", "ghost@example.com")
        ghost.id = 9999
        with pytest.raises(NoRowsAffectedError):
            await user_store.update_user(ghost)

        assert await user_store.get_user_by_username("ghost") is None
        loaded = await user_store.get_user_by_username("alice")
        assert loaded.email == "alice@example.com"

    @pytest.mark.asyncio
    async def test_update_to_taken_email_conflicts(self, user_store):
        await user_store.create_user(make_user())
        bob = await user_store.create_user(make_user("bob", "bob@example.com"))

        bob.email = "alice@example.com"
        with pytest.raises(ConflictError):
            await user_store.update_user(bob)
