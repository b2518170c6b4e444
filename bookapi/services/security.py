"""
Security Service

Password hashing with bcrypt (passlib).

The cost factor is fixed at 10 rounds. Hashing runs whenever a user
record's password is set or rotated; OAuth-only accounts never receive
a hash.

Usage:
    from bookapi.services.security import hash_password, verify_password

    hashed = hash_password("secret1")
    verify_password("secret1", hashed)  # True
"""

import logging

from passlib.context import CryptContext

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 10

# bcrypt only reads the first 72 bytes of a secret
BCRYPT_MAX_BYTES = 72

# -------------------------------------------------------------------------
# Password Hashing Configuration
# -------------------------------------------------------------------------
# - schemes: bcrypt only
# - deprecated: "auto" marks hashes of other schemes as needing an upgrade
# - bcrypt__rounds: work factor (2^10 iterations)
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=BCRYPT_ROUNDS,
)


def _bcrypt_secret(password: str) -> bytes:
    """
    Encode a password for bcrypt, cut to the bytes bcrypt actually uses.

    Longer passwords are accepted; only their first 72 bytes take part in
    hashing and verification, the same way on every bcrypt release.
    """
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """
    Hash a plain text password using bcrypt.

    A new random salt is generated on every call, so hashing the same
    password twice gives different results.

    Args:
        password: Plain text password

    Returns:
        Bcrypt hash of the password
    """
    return pwd_context.hash(_bcrypt_secret(password))


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """
    Verify a plain password against a stored hash.

    Never raises for bad input: a missing hash (OAuth-only account) or a
    hash passlib cannot parse is reported as a non-match.

    Args:
        plain_password: The password to verify
        hashed_password: The stored bcrypt hash, if any

    Returns:
        True if password matches, False otherwise
    """
    if not hashed_password or plain_password is None:
        return False
    try:
        return pwd_context.verify(_bcrypt_secret(plain_password), hashed_password)
    except (ValueError, TypeError) as e:
        logger.warning(f"Password verification failed on stored hash: {e}")
        return False
