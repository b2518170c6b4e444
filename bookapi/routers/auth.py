"""
Authentication Router

Handles user authentication endpoints:
- Registration (email/password -> bearer token)
- Login (email/password -> bearer token)
- Logout (acknowledgement only; tokens are not tracked server side)
- Current account and password rotation (bearer token required)
- Google sign-in (authorization URL, redirect, callback)

Security:
=========
- Passwords are hashed with bcrypt before storage, never logged
- Login failures look the same whether the email is unknown or the
  password is wrong
- Bearer tokens expire after one hour
- The OAuth `state` value rides in a signed session cookie for the
  redirect round-trip only
"""

import logging
import secrets
from urllib.parse import urlencode

from fastapi import APIRouter, Request, status
from starlette.responses import RedirectResponse

from bookapi.dependencies import CurrentIdentity, GoogleProvider, Tokens, Users
from bookapi.exceptions import (
    EmailInUse,
    InvalidCredentials,
    OAuthError,
    Unauthorized,
    ValidationFailed,
)
from bookapi.models.user import public_user
from bookapi.schemas.user import (
    AuthResponse,
    AuthURLResponse,
    LoginRequest,
    MessageResponse,
    PasswordChange,
    RegisterRequest,
    UserPublic,
)
from bookapi.services.oauth import GoogleOAuth, resolve_account
from bookapi.services.rate_limiter import auth_rate_limit, limiter
from bookapi.services.tokens import TokenIssuer

logger = logging.getLogger(__name__)

OAUTH_STATE_KEY = "oauth_state"

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
    responses={
        400: {"description": "Validation failed, invalid credentials or email in use"},
        401: {"description": "Missing or invalid bearer token"},
        500: {"description": "Server misconfigured"},
    },
)


def _auth_response(tokens: TokenIssuer, user: dict) -> AuthResponse:
    token = tokens.issue(str(user["_id"]), user["email"])
    return AuthResponse(token=token, user=UserPublic(**public_user(user)))


# -------------------------------------------------------------------------
# Local Accounts
# -------------------------------------------------------------------------
@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    description="""
    Create an email/password account and sign it in.

    - Email must be valid and not already registered (case-insensitive)
    - Password must be at least 6 characters
    """,
)
@limiter.limit(auth_rate_limit)
async def register(
    request: Request,
    payload: RegisterRequest,
    users: Users,
    tokens: Tokens,
) -> AuthResponse:
    """
    Register a new user with email and password.

    The signing secret is checked before the account is written, so a
    misconfigured server does not leave accounts nobody could sign in to.
    """
    tokens.ensure_configured()

    if await users.find_by_email(payload.email):
        raise EmailInUse()

    user = await users.create_local(
        email=payload.email,
        password=payload.password,
        name=payload.name,
    )
    logger.info(f"New user registered: {user['email']}")

    return _auth_response(tokens, user)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Login with email and password",
    description="""
    Authenticate with email and password to receive a bearer token.

    Include the token in the Authorization header:
    ```
    Authorization: Bearer <token>
    ```
    """,
)
@limiter.limit(auth_rate_limit)
async def login(
    request: Request,
    payload: LoginRequest,
    users: Users,
    tokens: Tokens,
) -> AuthResponse:
    """Authenticate a local account."""
    tokens.ensure_configured()

    user = await users.authenticate(payload.email, payload.password)
    if user is None:
        logger.warning(f"Login failed for {payload.email}")
        raise InvalidCredentials()

    logger.info(f"User logged in: {user['email']}")
    return _auth_response(tokens, user)


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Logout",
    description="""
    Acknowledge a logout. Tokens are not tracked by the server, so the
    client must discard its token; any pending OAuth state is cleared.
    """,
)
async def logout(request: Request) -> MessageResponse:
    request.session.clear()
    return MessageResponse(message="Logged out")


@router.get(
    "/me",
    response_model=UserPublic,
    summary="Get current user",
)
async def get_me(identity: CurrentIdentity, users: Users) -> UserPublic:
    """Return the account the bearer token was issued for."""
    user = await users.get(identity.user_id)
    if user is None:
        raise Unauthorized("Account no longer exists")
    return UserPublic(**public_user(user))


@router.put(
    "/password",
    response_model=MessageResponse,
    summary="Change password",
    description="Rotate the current account's password. Requires the current password.",
)
@limiter.limit(auth_rate_limit)
async def change_password(
    request: Request,
    payload: PasswordChange,
    identity: CurrentIdentity,
    users: Users,
) -> MessageResponse:
    user = await users.get(identity.user_id)
    if user is None:
        raise Unauthorized("Account no longer exists")

    if not user.get("passwordHash"):
        raise ValidationFailed(
            "Cannot change password for an account that signs in with Google"
        )

    if await users.authenticate(user["email"], payload.current_password) is None:
        raise InvalidCredentials("Current password is incorrect")

    await users.set_password(identity.user_id, payload.new_password)
    logger.info(f"Password changed for user: {user['email']}")

    return MessageResponse(message="Password updated")


# =============================================================================
# Google OAuth
# =============================================================================
def _start_oauth(request: Request, google: GoogleOAuth) -> str:
    """Create a fresh state value, remember it in the session, build the URL."""
    google.ensure_enabled()
    state = secrets.token_urlsafe(24)
    request.session[OAUTH_STATE_KEY] = state
    return google.authorization_url(state)


def _failure_redirect(request: Request, reason: str) -> RedirectResponse:
    target = request.app.state.settings.oauth_failure_redirect
    separator = "&" if "?" in target else "?"
    return RedirectResponse(
        url=f"{target}{separator}{urlencode({'error': reason})}",
        status_code=status.HTTP_302_FOUND,
    )


@router.get(
    "/google/url",
    response_model=AuthURLResponse,
    summary="Get the Google authorization URL",
    description="Return the URL a browser should open to sign in with Google.",
    responses={400: {"description": "Google OAuth not configured"}},
)
async def google_auth_url(request: Request, google: GoogleProvider) -> AuthURLResponse:
    return AuthURLResponse(url=_start_oauth(request, google))


@router.get(
    "/google",
    summary="Login with Google",
    description="Redirect to the Google sign-in page.",
    responses={
        302: {"description": "Redirect to Google OAuth"},
        400: {"description": "Google OAuth not configured"},
    },
)
async def google_login(request: Request, google: GoogleProvider) -> RedirectResponse:
    return RedirectResponse(
        url=_start_oauth(request, google),
        status_code=status.HTTP_302_FOUND,
    )


@router.get(
    "/google/callback",
    response_model=AuthResponse,
    summary="Google OAuth callback",
    description="""
    Handle the redirect back from Google.

    1. Checks the state value against the one stored in the session by
       /google or /google/url; a callback without that round-trip fails
    2. Exchanges the authorization code for the verified profile
    3. Finds the account for the Google id, creating it on first sign-in
    4. Returns a bearer token

    Any failure redirects to the configured failure page with an
    `error` query parameter; no account is created.
    """,
)
async def google_callback(
    request: Request,
    google: GoogleProvider,
    users: Users,
    tokens: Tokens,
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
):
    google.ensure_enabled()
    tokens.ensure_configured()

    expected_state = request.session.pop(OAUTH_STATE_KEY, None)

    if error:
        logger.warning(f"Google sign-in denied: {error}")
        return _failure_redirect(request, "access_denied")

    if not code:
        return _failure_redirect(request, "missing_code")

    if expected_state is None or not secrets.compare_digest(
        (state or "").encode(), expected_state.encode()
    ):
        logger.warning("Google callback state mismatch")
        return _failure_redirect(request, "state_mismatch")

    try:
        profile = await google.fetch_profile(code)
    except OAuthError as e:
        logger.warning(f"Google sign-in failed: {e}")
        return _failure_redirect(request, e.reason)

    try:
        user = await resolve_account(users, profile)
    except EmailInUse:
        logger.warning(
            f"Google sign-in for {profile.email} collides with an existing account"
        )
        return _failure_redirect(request, "email_in_use")

    logger.info(f"Google OAuth login: {user['email']}")
    return _auth_response(tokens, user)
