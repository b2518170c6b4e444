"""
Application Configuration Module

This module uses Pydantic Settings for type-safe configuration management.

Every value comes from environment variables (or a local .env file).
Optional integrations are resolved once into capability flags:

- mongodb_uri missing  -> the API starts in degraded mode and data routes
                          fail per request instead of at startup
- jwt_secret missing   -> routes that issue or verify tokens answer 500
- google_* incomplete  -> OAuth endpoints answer 400 "not configured"

Usage:
    from bookapi.config import get_settings

    settings = get_settings()
    if settings.oauth_enabled:
        ...
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    SECURITY NOTE:
    ==============
    - jwt_secret is never defaulted; an unset secret disables token issuance
    - Placeholder values for jwt_secret are rejected at startup
    """

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------
    app_name: str = Field(
        default="Books and Authors API",
        description="Application name displayed in docs and logs"
    )
    api_version: str = Field(
        default="1.0.0",
        description="Version string reported by the root endpoint"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode (detailed errors, auto-reload)"
    )
    host: str = Field(
        default="0.0.0.0",
        description="Host to bind the server to"
    )
    port: int = Field(
        default=3000,
        description="Port to bind the server to"
    )
    environment: str = Field(
        default="development",
        description="Environment: development, staging, production"
    )

    # -------------------------------------------------------------------------
    # Database Settings
    # -------------------------------------------------------------------------
    mongodb_uri: Optional[str] = Field(
        default=None,
        description="MongoDB connection string; unset starts the API without a database"
    )
    mongodb_db_name: str = Field(
        default="books_api",
        description="Database used when the connection string names none"
    )

    # -------------------------------------------------------------------------
    # Security Settings
    # -------------------------------------------------------------------------
    jwt_secret: Optional[str] = Field(
        default=None,
        description="Secret used to sign bearer tokens"
    )
    session_secret: Optional[str] = Field(
        default=None,
        description="Key signing the short-lived OAuth session cookie"
    )
    allowed_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins"
    )

    # -------------------------------------------------------------------------
    # Google OAuth Settings
    # -------------------------------------------------------------------------
    google_client_id: Optional[str] = Field(default=None)
    google_client_secret: Optional[str] = Field(default=None)
    google_callback_url: Optional[str] = Field(
        default=None,
        description="Absolute URL Google redirects back to after sign-in"
    )
    oauth_failure_redirect: str = Field(
        default="/",
        description="Where a failed OAuth callback sends the browser"
    )

    # -------------------------------------------------------------------------
    # Rate Limiting Settings
    # -------------------------------------------------------------------------
    rate_limit_enabled: bool = Field(
        default=True,
        description="Throttle the credential endpoints"
    )
    rate_limit_auth: str = Field(
        default="10/minute",
        description="Limit applied to register and login"
    )

    # -------------------------------------------------------------------------
    # Logging Settings
    # -------------------------------------------------------------------------
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------
    @property
    def allowed_origins_list(self) -> List[str]:
        """Parse comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",")]

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def database_configured(self) -> bool:
        return bool(self.mongodb_uri)

    @property
    def oauth_enabled(self) -> bool:
        """
        Google sign-in is available only when every provider setting is present.

        A partially configured provider is treated as absent so the OAuth
        endpoints fail fast with a clear message instead of deep inside
        the token exchange.
        """
        return bool(
            self.google_client_id
            and self.google_client_secret
            and self.google_callback_url
        )

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate that log_level is a valid Python logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v.upper()

    @field_validator("jwt_secret")
    @classmethod
    def validate_jwt_secret(cls, v: Optional[str]) -> Optional[str]:
        """
        Reject placeholder secrets copied from example env files.

        An empty value is normalised to None so that the "secret missing"
        path is taken consistently.

        Raises:
            ValueError: If the secret is a known placeholder
        """
        if v is None or not v.strip():
            return None

        placeholder_indicators = [
            "REPLACE_WITH",
            "change-me",
            "your-secret",
            "generate-with",
        ]
        for indicator in placeholder_indicators:
            if indicator.lower() in v.lower():
                raise ValueError(
                    "JWT_SECRET contains a placeholder value. "
                    "Generate a secure key with: openssl rand -hex 32"
                )
        return v

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is a known value."""
        valid_envs = {"development", "staging", "production"}
        if v.lower() not in valid_envs:
            raise ValueError(f"environment must be one of {valid_envs}")
        return v.lower()


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    The first call reads the environment and .env file; later calls
    return the same instance.
    """
    return Settings()
