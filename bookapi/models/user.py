"""
User Model

A user document in the `users` collection. Supports both email/password
accounts and accounts provisioned through Google sign-in.

Document shape:
    {
        "_id": ObjectId,
        "name": str | None,
        "email": str,               # unique, lower-cased, trimmed
        "passwordHash": str,        # local accounts only
        "provider": "local" | "google",
        "providerId": str,          # OAuth accounts only
        "createdAt": datetime,
        "updatedAt": datetime,
    }

Invariants:
- email is unique across providers (unique index)
- provider "local" requires a non-empty passwordHash
- provider "google" requires a non-empty providerId
"""

from enum import Enum
from typing import Any

from bookapi.utils import utcnow


class AuthProvider(str, Enum):
    """
    Authentication providers supported by the system.

    - LOCAL: Email/password registration
    - GOOGLE: Google OAuth
    """
    LOCAL = "local"
    GOOGLE = "google"


def normalize_email(email: str) -> str:
    return email.strip().lower()


def new_user_document(
    email: str,
    provider: AuthProvider,
    name: str | None = None,
    password_hash: str | None = None,
    provider_id: str | None = None,
) -> dict[str, Any]:
    """
    Build a user document ready for insertion.

    Raises:
        ValueError: If the provider-specific invariant does not hold
    """
    email = normalize_email(email or "")
    if not email:
        raise ValueError("email is required")
    if provider == AuthProvider.LOCAL and not password_hash:
        raise ValueError("local accounts require a password hash")
    if provider != AuthProvider.LOCAL and not provider_id:
        raise ValueError(f"{provider.value} accounts require a provider id")

    now = utcnow()
    document: dict[str, Any] = {
        "name": name.strip() if name else name,
        "email": email,
        "provider": provider.value,
        "createdAt": now,
        "updatedAt": now,
    }
    if password_hash:
        document["passwordHash"] = password_hash
    if provider_id:
        document["providerId"] = provider_id
    return document


def public_user(document: dict[str, Any]) -> dict[str, Any]:
    """The projection returned to clients: never includes the password hash."""
    return {
        "id": str(document["_id"]),
        "email": document["email"],
        "name": document.get("name"),
    }
