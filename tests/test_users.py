"""
Tests for the User Repository and User Documents

Covers the credential store directly, below the HTTP layer:
- Provider invariants on new user documents
- Email normalization and uniqueness
- A registration race lost at the unique index
- Google account resolution
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.errors import DuplicateKeyError

from bookapi.exceptions import EmailInUse
from bookapi.models.user import AuthProvider, new_user_document, public_user
from bookapi.services.oauth import GoogleProfile, resolve_account
from bookapi.services.users import UserRepository


class TestUserDocument:
    def test_local_requires_password_hash(self):
        with pytest.raises(ValueError):
            new_user_document(email="a@x.com", provider=AuthProvider.LOCAL)

    def test_google_requires_provider_id(self):
        with pytest.raises(ValueError):
            new_user_document(email="a@x.com", provider=AuthProvider.GOOGLE)

    def test_email_required(self):
        with pytest.raises(ValueError):
            new_user_document(email="  ", provider=AuthProvider.LOCAL, password_hash="h")

    def test_email_normalized(self):
        document = new_user_document(
            email="  A@X.Com ",
            provider=AuthProvider.LOCAL,
            password_hash="hash",
        )

        assert document["email"] == "a@x.com"
        assert document["provider"] == "local"
        assert "providerId" not in document

    def test_public_user_hides_hash(self):
        document = new_user_document(
            email="a@x.com",
            provider=AuthProvider.LOCAL,
            name="Ada",
            password_hash="hash",
        )
        document["_id"] = "user-1"

        assert public_user(document) == {"id": "user-1", "email": "a@x.com", "name": "Ada"}


class TestUserRepository:
    @pytest.fixture
    def users(self, mongo_db) -> UserRepository:
        return UserRepository(mongo_db)

    @pytest.mark.asyncio
    async def test_create_and_authenticate(self, users: UserRepository):
        created = await users.create_local("A@X.com", "secret1", name="Ada")

        assert created["email"] == "a@x.com"
        assert await users.authenticate("a@x.com", "secret1") is not None
        assert await users.authenticate("a@x.com", "wrong") is None
        assert await users.authenticate("nobody@x.com", "secret1") is None

    @pytest.mark.asyncio
    async def test_get_by_id(self, users: UserRepository):
        created = await users.create_local("a@x.com", "secret1")

        found = await users.get(str(created["_id"]))

        assert found["email"] == "a@x.com"
        assert await users.get("not-an-id") is None

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected_by_index(self, users: UserRepository):
        await users.create_local("a@x.com", "secret1")

        with pytest.raises(EmailInUse):
            await users.create_local("A@x.com", "secret2")

    @pytest.mark.asyncio
    async def test_concurrent_registration_loser_gets_email_in_use(self):
        """The insert that loses the race at the unique index maps to EmailInUse."""
        collection = MagicMock()
        collection.insert_one = AsyncMock(
            side_effect=DuplicateKeyError("E11000 duplicate key error")
        )
        database = MagicMock()
        database.__getitem__.return_value = collection

        users = UserRepository(database)

        with pytest.raises(EmailInUse):
            await users.create_local("a@x.com", "secret1")

    @pytest.mark.asyncio
    async def test_oauth_account_has_no_password(self, users: UserRepository):
        created = await users.create_oauth(AuthProvider.GOOGLE, "google-123", "g@x.com")

        assert "passwordHash" not in created
        assert await users.authenticate("g@x.com", "") is None
        assert await users.find_by_provider(AuthProvider.GOOGLE, "google-123") is not None

    @pytest.mark.asyncio
    async def test_set_password(self, users: UserRepository):
        created = await users.create_local("a@x.com", "secret1")

        await users.set_password(str(created["_id"]), "secret2")

        assert await users.authenticate("a@x.com", "secret1") is None
        assert await users.authenticate("a@x.com", "secret2") is not None


class TestResolveAccount:
    @pytest.mark.asyncio
    async def test_reuses_existing_account(self, mongo_db):
        users = UserRepository(mongo_db)
        profile = GoogleProfile(provider_id="google-123", email="g@x.com", name="Grace")

        first = await resolve_account(users, profile)
        second = await resolve_account(users, profile)

        assert first["_id"] == second["_id"]
        assert await mongo_db["users"].count_documents({}) == 1

    @pytest.mark.asyncio
    async def test_existing_email_not_merged(self, mongo_db):
        users = UserRepository(mongo_db)
        await users.create_local("g@x.com", "secret1")
        profile = GoogleProfile(provider_id="google-123", email="g@x.com")

        with pytest.raises(EmailInUse):
            await resolve_account(users, profile)
