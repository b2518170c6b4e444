"""
FastAPI Application Entry Point

This module creates and configures the FastAPI application.

Key Concepts:
=============

1. Application Factory Pattern
   - create_app(settings) returns a configured app
   - Components that need configuration (token issuer, Google client) are
     built here once and kept on app.state; nothing reads the environment
     per request

2. Lifespan Events
   - startup: connect to MongoDB (or log degraded mode) and create indexes
   - shutdown: close the client

3. Middleware Stack
   - CORS: Allow cross-origin requests
   - Sessions: signed cookie carrying the OAuth state during the redirect

4. Exception Handlers
   - APIError subclasses -> their status with {"message": ...}
   - Request validation -> 400 "Validation failed"
   - Unhandled errors -> 500, details only in development or debug mode
"""

import logging
import secrets
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import DuplicateKeyError
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from bookapi.config import Settings, get_settings
from bookapi.database import MongoConnection
from bookapi.exceptions import APIError, DuplicateKey, Unauthorized
from bookapi.routers import auth_router, authors_router, books_router
from bookapi.services.oauth import GoogleOAuth
from bookapi.services.rate_limiter import configure_limiter, rate_limit_exceeded_handler
from bookapi.services.tokens import TokenIssuer
from bookapi.utils import duplicate_key_field

# =============================================================================
# Logging Configuration
# =============================================================================
settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# Lifespan Events
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    app_settings: Settings = app.state.settings

    # ----- STARTUP -----
    logger.info(f"Starting {app_settings.app_name}...")

    await app.state.mongo.connect()

    if not app.state.token_issuer.configured:
        logger.warning("JWT_SECRET not set - register, login and OAuth will return 500")
    if app.state.google_oauth.enabled:
        logger.info("Google OAuth enabled")
    else:
        logger.info("Google OAuth not configured - OAuth endpoints disabled")

    yield

    # ----- SHUTDOWN -----
    logger.info(f"Shutting down {app_settings.app_name}...")
    app.state.mongo.close()


# =============================================================================
# Exception Handlers
# =============================================================================
def _validation_errors(exc: RequestValidationError) -> list[dict]:
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        errors.append({
            "field": ".".join(location),
            "msg": error.get("msg"),
        })
    return errors


def register_exception_handlers(app: FastAPI, app_settings: Settings) -> None:
    show_details = app_settings.debug or app_settings.environment == "development"

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
        else:
            logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc.message}")

        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthorized) else None
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_dict(),
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        error = APIError("Validation failed", errors=_validation_errors(exc))
        return JSONResponse(status_code=400, content=error.to_dict())

    @app.exception_handler(DuplicateKeyError)
    async def duplicate_key_handler(
        request: Request,
        exc: DuplicateKeyError,
    ) -> JSONResponse:
        error = DuplicateKey(duplicate_key_field(exc) or "Value")
        logger.warning(f"Duplicate key on {request.url.path}: {exc}")
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:
        message = "Route not found" if exc.status_code == 404 else str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": message},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """
        Catch-all exception handler.

        The full error is logged; the client only sees the message unless
        the app runs in development or debug mode.
        """
        logger.error(f"Unhandled error: {exc}", exc_info=True)

        content = {"message": "Something went wrong!"}
        if show_details:
            content["error"] = str(exc)
        return JSONResponse(status_code=500, content=content)


# =============================================================================
# Application Factory
# =============================================================================
def create_app(app_settings: Settings | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Settings to use; defaults to the cached environment settings

    Returns:
        Configured FastAPI application instance
    """
    app_settings = app_settings or settings

    app = FastAPI(
        title=app_settings.app_name,
        description="""
## Books and Authors API

CRUD for books and authors.

### Authentication
- Email/password: `POST /api/auth/register`, `POST /api/auth/login`
- Google: `GET /api/auth/google` (or `/api/auth/google/url`)

Send the returned token as `Authorization: Bearer <token>`.
Author writes require a token; book routes are open.
        """,
        version=app_settings.api_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # -------------------------------------------------------------------------
    # Configured Components
    # -------------------------------------------------------------------------
    app.state.settings = app_settings
    app.state.mongo = MongoConnection(app_settings)
    app.state.token_issuer = TokenIssuer(app_settings.jwt_secret)
    app.state.google_oauth = GoogleOAuth(app_settings)

    # -------------------------------------------------------------------------
    # Rate Limiting
    # -------------------------------------------------------------------------
    app.state.limiter = configure_limiter(app_settings)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # -------------------------------------------------------------------------
    # Middleware
    # -------------------------------------------------------------------------
    app.add_middleware(
        SessionMiddleware,
        secret_key=app_settings.session_secret or secrets.token_urlsafe(32),
        session_cookie="bookapi_session",
        max_age=10 * 60,  # long enough for one sign-in round-trip
        same_site="lax",
        https_only=app_settings.is_production,
    )

    origins = app_settings.allowed_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Browsers reject credentialed requests to a wildcard origin
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app, app_settings)

    # -------------------------------------------------------------------------
    # Register Routers
    # -------------------------------------------------------------------------
    app.include_router(auth_router, prefix="/api")
    app.include_router(books_router, prefix="/api")
    app.include_router(authors_router, prefix="/api")

    # -------------------------------------------------------------------------
    # Root and Health
    # -------------------------------------------------------------------------
    @app.get("/", tags=["Root"], summary="API root")
    async def root() -> dict:
        return {
            "message": app_settings.app_name,
            "version": app_settings.api_version,
            "documentation": "/docs",
        }

    @app.get("/health", tags=["Health"], summary="Health check")
    async def health_check(request: Request) -> dict:
        database = await request.app.state.mongo.ping()
        return {
            "status": "healthy" if database == "connected" else "degraded",
            "app": app_settings.app_name,
            "version": app_settings.api_version,
            "database": database,
            "oauth_enabled": request.app.state.google_oauth.enabled,
            "token_signing": request.app.state.token_issuer.configured,
        }

    return app


# =============================================================================
# Application Instance
# =============================================================================
# uvicorn bookapi.main:app

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "bookapi.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
