"""
OAuth Service

Google sign-in using the authorization-code flow.

This service:
1. Builds the Google authorization URL (client id, redirect URI,
   scope "profile email", response_type=code, state)
2. Exchanges the authorization code for a provider token and fetches
   the verified profile
3. Resolves the profile to a user account, creating one on first sign-in

The provider is active only when client id, secret and callback URL are
all configured; GoogleOAuth.enabled is computed once at startup.
"""

import logging
from dataclasses import dataclass
from typing import Any

import httpx
from authlib.common.errors import AuthlibBaseError
from authlib.integrations.httpx_client import AsyncOAuth2Client
from authlib.oauth2.rfc6749.parameters import prepare_grant_uri

from bookapi.config import Settings
from bookapi.exceptions import NotConfigured, OAuthError
from bookapi.models.user import AuthProvider
from bookapi.services.users import UserRepository

logger = logging.getLogger(__name__)

GOOGLE_AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"
GOOGLE_SCOPE = "profile email"


@dataclass
class GoogleProfile:
    """The parts of a verified Google profile the API uses."""

    provider_id: str
    email: str
    name: str | None = None

    @classmethod
    def from_userinfo(cls, data: dict[str, Any]) -> "GoogleProfile":
        """
        Normalize a userinfo response.

        Raises:
            OAuthError: If the subject id or email is missing
        """
        provider_id = data.get("id") or data.get("sub")
        email = (data.get("email") or "").strip()
        if not provider_id or not email:
            raise OAuthError("invalid_profile", "Google profile lacks id or email")
        return cls(
            provider_id=str(provider_id),
            email=email,
            name=data.get("name"),
        )


class GoogleOAuth:
    """Google OAuth client configured from Settings."""

    def __init__(self, settings: Settings):
        self.enabled = settings.oauth_enabled
        self.client_id = settings.google_client_id
        self.client_secret = settings.google_client_secret
        self.redirect_uri = settings.google_callback_url

    def ensure_enabled(self) -> None:
        if not self.enabled:
            raise NotConfigured()

    def authorization_url(self, state: str) -> str:
        """
        Build the URL the browser is sent to for Google sign-in.

        Raises:
            NotConfigured: If Google OAuth is disabled
        """
        self.ensure_enabled()
        return prepare_grant_uri(
            GOOGLE_AUTHORIZE_URL,
            client_id=self.client_id,
            response_type="code",
            redirect_uri=self.redirect_uri,
            scope=GOOGLE_SCOPE,
            state=state,
        )

    async def fetch_profile(self, code: str) -> GoogleProfile:
        """
        Exchange an authorization code for the user's verified profile.

        Raises:
            NotConfigured: If Google OAuth is disabled
            OAuthError: If the exchange or the userinfo call fails
        """
        self.ensure_enabled()
        async with AsyncOAuth2Client(
            client_id=self.client_id,
            client_secret=self.client_secret,
            scope=GOOGLE_SCOPE,
            redirect_uri=self.redirect_uri,
        ) as client:
            try:
                await client.fetch_token(GOOGLE_TOKEN_URL, code=code)
                response = await client.get(GOOGLE_USERINFO_URL)
            except (AuthlibBaseError, httpx.HTTPError) as e:
                logger.error(f"Google token exchange failed: {e}")
                raise OAuthError("exchange_failed", str(e)) from e

        if response.status_code != 200:
            logger.error(f"Google user info failed: {response.text}")
            raise OAuthError("userinfo_failed", "Failed to fetch user info")

        profile = GoogleProfile.from_userinfo(response.json())
        logger.info(f"Google OAuth successful for: {profile.email}")
        return profile


async def resolve_account(users: UserRepository, profile: GoogleProfile) -> dict[str, Any]:
    """
    Find the account for a Google profile, creating it on first sign-in.

    Lookup is by (provider, providerId). For an existing account the
    email on file is kept as is; it is not re-synced from the profile.

    Raises:
        EmailInUse: If a new account's email is held by another account
    """
    existing = await users.find_by_provider(AuthProvider.GOOGLE, profile.provider_id)
    if existing:
        logger.info(f"Found existing OAuth user: {existing['email']}")
        return existing

    user = await users.create_oauth(
        provider=AuthProvider.GOOGLE,
        provider_id=profile.provider_id,
        email=profile.email,
        name=profile.name,
    )
    logger.info(f"Created new OAuth user: {user['email']}")
    return user
