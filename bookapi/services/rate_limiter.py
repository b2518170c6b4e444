"""
Rate Limiting Service

Throttles the credential endpoints (register, login) with slowapi to
slow down password guessing and signup spam.

Limits are kept in process memory, keyed by client IP. Route decorators
bind to the module-level limiter at import time; create_app() calls
configure_limiter(settings) so the switch and the auth limit come from the
app's own Settings, then attaches the limiter to app.state.limiter for
slowapi's error handling.
"""

import logging

from fastapi import Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from bookapi.config import Settings, get_settings

logger = logging.getLogger(__name__)


def get_client_ip(request: Request) -> str:
    """
    Get client IP address for rate limiting.

    Honours X-Forwarded-For and X-Real-IP set by a reverse proxy.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    return get_remote_address(request)


def create_limiter(settings: Settings) -> Limiter:
    limiter = Limiter(
        key_func=get_client_ip,
        strategy="fixed-window",
        enabled=settings.rate_limit_enabled,
    )
    logger.info(
        f"Rate limiter initialized - enabled: {settings.rate_limit_enabled}, "
        f"auth limit: {settings.rate_limit_auth}"
    )
    return limiter


# Route decorators check limits against this instance, so it exists from
# import time; configure_limiter() applies an app's settings to it.
limiter = create_limiter(get_settings())
_auth_limit = get_settings().rate_limit_auth


def auth_rate_limit() -> str:
    """Limit for the credential endpoints, read on every request."""
    return _auth_limit


def configure_limiter(settings: Settings) -> Limiter:
    """
    Apply Settings to the shared limiter.

    Counters from earlier requests are cleared so a new limit starts fresh.
    """
    global _auth_limit
    limiter.enabled = settings.rate_limit_enabled
    _auth_limit = settings.rate_limit_auth
    limiter.reset()
    logger.info(
        f"Rate limiter configured - enabled: {settings.rate_limit_enabled}, "
        f"auth limit: {settings.rate_limit_auth}"
    )
    return limiter


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Return 429 with a Retry-After hint."""
    limit_detail = str(exc.detail)

    response = JSONResponse(
        status_code=429,
        content={
            "message": "Too many requests. Please slow down.",
            "error": limit_detail,
        },
    )
    response.headers["Retry-After"] = str(60)

    logger.warning(f"Rate limit exceeded for {get_client_ip(request)}: {limit_detail}")

    return response
