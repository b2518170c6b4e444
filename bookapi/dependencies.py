"""
FastAPI Dependencies Module

Dependencies are reusable components injected into route handlers.

Provided here:
- Database: the motor database handle (StoreUnavailable in degraded mode)
- Users: a UserRepository bound to that database
- Tokens / GoogleProvider: components built once by create_app() from
  Settings and kept on app.state
- CurrentIdentity: the protected-route gate
"""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from motor.motor_asyncio import AsyncIOMotorDatabase

from bookapi.database import get_database
from bookapi.exceptions import Unauthorized
from bookapi.services.oauth import GoogleOAuth
from bookapi.services.tokens import TokenIssuer
from bookapi.services.users import UserRepository

# =============================================================================
# Store
# =============================================================================
Database = Annotated[AsyncIOMotorDatabase, Depends(get_database)]


def get_user_repository(database: Database) -> UserRepository:
    return UserRepository(database)


Users = Annotated[UserRepository, Depends(get_user_repository)]


# =============================================================================
# Configured Components
# =============================================================================
def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_google_oauth(request: Request) -> GoogleOAuth:
    return request.app.state.google_oauth


Tokens = Annotated[TokenIssuer, Depends(get_token_issuer)]
GoogleProvider = Annotated[GoogleOAuth, Depends(get_google_oauth)]


# =============================================================================
# Bearer Token Authentication
# =============================================================================
# auto_error=False: a missing header reaches get_current_identity, which
# raises Unauthorized so the response keeps the API's {"message": ...} shape.
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Identity:
    """The authenticated caller, as proven by a bearer token."""

    user_id: str
    email: str | None


def get_current_identity(
    request: Request,
    tokens: Tokens,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Identity:
    """
    Gate for protected routes.

    1. Extracts the token from "Authorization: Bearer <token>"
    2. Verifies signature and expiry with the app's TokenIssuer
    3. Attaches the identity to request.state.identity

    The check is stateless: the account is not looked up in the store.

    Raises:
        Unauthorized: 401 if the token is missing, invalid or expired
    """
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Not authenticated")

    claims = tokens.verify(credentials.credentials)
    identity = Identity(user_id=claims.user_id, email=claims.email)
    request.state.identity = identity
    return identity


CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
