"""
Token Issuer

Signs and verifies the bearer tokens handed out by the auth endpoints.

Tokens are HS256 JWTs carrying the account id (`sub` and `id`) and the
email, valid for one hour. They are stateless: nothing is stored server
side and there is no revocation, so logging out only means the client
throws its token away.

The signing secret comes from configuration. When it is missing the
issuer still exists but every call raises ServerMisconfigured; the rest
of the API keeps working.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from jose import ExpiredSignatureError, JWTError, jwt

from bookapi.exceptions import ServerMisconfigured, Unauthorized

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
TOKEN_LIFETIME = timedelta(hours=1)


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a verified token."""

    user_id: str
    email: str | None
    expires_at: datetime


class TokenIssuer:
    """
    Issue and verify bearer tokens with a server-held secret.

    Built once at startup from Settings.jwt_secret and stored on
    app.state.token_issuer.
    """

    def __init__(self, secret: str | None, lifetime: timedelta = TOKEN_LIFETIME):
        self._secret = secret
        self.lifetime = lifetime

    @property
    def configured(self) -> bool:
        return bool(self._secret)

    def _require_secret(self) -> str:
        if not self._secret:
            logger.error("JWT_SECRET not configured")
            raise ServerMisconfigured(detail="JWT_SECRET not configured on server")
        return self._secret

    def ensure_configured(self) -> None:
        """Raise ServerMisconfigured now rather than after side effects."""
        self._require_secret()

    def issue(self, user_id: str, email: str | None) -> str:
        """
        Create a signed token for an account.

        Args:
            user_id: The account's store id
            email: The account's email

        Returns:
            Encoded JWT string

        Raises:
            ServerMisconfigured: If no signing secret is configured
        """
        secret = self._require_secret()
        now = datetime.now(UTC)
        claims = {
            "sub": str(user_id),
            "id": str(user_id),
            "email": email,
            "iat": now,
            "exp": now + self.lifetime,
        }
        return jwt.encode(claims, secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> TokenClaims:
        """
        Decode and validate a token.

        Raises:
            Unauthorized: If the token is malformed, tampered with or expired
            ServerMisconfigured: If no signing secret is configured
        """
        secret = self._require_secret()
        try:
            payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
        except ExpiredSignatureError:
            raise Unauthorized("Token expired") from None
        except JWTError as e:
            logger.warning(f"JWT decode error: {e}")
            raise Unauthorized("Invalid token") from None

        user_id = payload.get("sub") or payload.get("id")
        if not user_id or "exp" not in payload:
            raise Unauthorized("Invalid token")

        return TokenClaims(
            user_id=str(user_id),
            email=payload.get("email"),
            expires_at=datetime.fromtimestamp(payload["exp"], UTC),
        )
