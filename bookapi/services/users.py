"""
User Repository

Credential store operations on the `users` collection.

Passwords are hashed here, as part of persisting the record, so no caller
can store a plaintext password by accident. A duplicate-key rejection from
the unique email index (two registrations racing for the same address)
is translated into EmailInUse. Hashing runs in the threadpool so bcrypt
does not stall the event loop.
"""

import logging
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError
from starlette.concurrency import run_in_threadpool

from bookapi.database import USERS
from bookapi.exceptions import EmailInUse
from bookapi.models.user import AuthProvider, new_user_document, normalize_email
from bookapi.services.security import hash_password, verify_password
from bookapi.utils import utcnow

logger = logging.getLogger(__name__)


class UserRepository:
    """Data access for user accounts."""

    def __init__(self, database: AsyncIOMotorDatabase):
        self.collection = database[USERS]

    async def get(self, user_id: str) -> dict[str, Any] | None:
        try:
            object_id = ObjectId(user_id)
        except (InvalidId, TypeError):
            return None
        return await self.collection.find_one({"_id": object_id})

    async def find_by_email(self, email: str) -> dict[str, Any] | None:
        return await self.collection.find_one({"email": normalize_email(email)})

    async def find_by_provider(
        self,
        provider: AuthProvider,
        provider_id: str,
    ) -> dict[str, Any] | None:
        return await self.collection.find_one(
            {"provider": provider.value, "providerId": provider_id}
        )

    async def create_local(
        self,
        email: str,
        password: str,
        name: str | None = None,
    ) -> dict[str, Any]:
        """
        Create an email/password account.

        Raises:
            EmailInUse: If another account already holds the email
        """
        document = new_user_document(
            email=email,
            provider=AuthProvider.LOCAL,
            name=name,
            password_hash=await run_in_threadpool(hash_password, password),
        )
        return await self._insert(document)

    async def create_oauth(
        self,
        provider: AuthProvider,
        provider_id: str,
        email: str,
        name: str | None = None,
    ) -> dict[str, Any]:
        """
        Create an account provisioned by an identity provider.

        No password hash is set. An email already used by a local account
        is rejected rather than merged.

        Raises:
            EmailInUse: If another account already holds the email
        """
        document = new_user_document(
            email=email,
            provider=provider,
            name=name,
            provider_id=provider_id,
        )
        return await self._insert(document)

    async def authenticate(self, email: str, password: str) -> dict[str, Any] | None:
        """
        Return the local account matching the credentials, or None.

        An unknown email, an account without a password hash and a wrong
        password all give None, so callers cannot tell them apart.
        """
        user = await self.find_by_email(email)
        if user is None:
            return None
        matches = await run_in_threadpool(
            verify_password, password, user.get("passwordHash")
        )
        return user if matches else None

    async def set_password(self, user_id: str, password: str) -> dict[str, Any] | None:
        """Rotate an account's password hash. Returns the updated document."""
        password_hash = await run_in_threadpool(hash_password, password)
        try:
            object_id = ObjectId(user_id)
        except (InvalidId, TypeError):
            return None
        return await self.collection.find_one_and_update(
            {"_id": object_id},
            {"$set": {"passwordHash": password_hash, "updatedAt": utcnow()}},
            return_document=ReturnDocument.AFTER,
        )

    async def _insert(self, document: dict[str, Any]) -> dict[str, Any]:
        try:
            result = await self.collection.insert_one(document)
        except DuplicateKeyError:
            logger.warning(f"Duplicate email rejected by store: {document['email']}")
            raise EmailInUse() from None
        document["_id"] = result.inserted_id
        return document
