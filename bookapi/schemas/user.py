"""
User / Auth Pydantic Schemas

Schemas:
- RegisterRequest: Registration data (email, password, optional name)
- LoginRequest: Login data (email, password)
- UserPublic: Public projection of an account (never exposes the hash)
- AuthResponse: Token plus public projection, returned by every sign-in
- AuthURLResponse: Google authorization URL
- MessageResponse: Plain acknowledgement
- PasswordChange: Current and new password for a rotation
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel


class RegisterRequest(BaseModel):
    """Schema for local registration."""

    email: EmailStr = Field(
        ...,
        description="Account email address (stored lower-cased)",
        examples=["a@x.com"],
    )

    password: str = Field(
        ...,
        min_length=6,
        description="Password (at least 6 characters)",
        examples=["secret1"],
    )

    name: str | None = Field(
        default=None,
        description="Display name",
        examples=["Ada Lovelace"],
    )

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class LoginRequest(BaseModel):
    """Schema for local login."""

    email: EmailStr = Field(..., examples=["a@x.com"])
    password: str = Field(..., min_length=1, examples=["secret1"])

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class UserPublic(BaseModel):
    """
    Schema for user responses.

    SECURITY: Never includes passwordHash or provider identifiers.
    """

    id: str = Field(..., description="Unique account identifier")
    email: str
    name: str | None = None


class AuthResponse(BaseModel):
    """Returned by register, login and the OAuth callback."""

    token: str = Field(
        ...,
        description="Bearer token, valid for one hour",
    )
    user: UserPublic


class AuthURLResponse(BaseModel):
    url: str = Field(..., description="Google authorization URL")


class MessageResponse(BaseModel):
    message: str


class PasswordChange(BaseModel):
    """Schema for rotating a local account's password."""

    current_password: str = Field(
        ...,
        min_length=1,
        description="Current password for verification",
    )

    new_password: str = Field(
        ...,
        min_length=6,
        description="New password (at least 6 characters)",
    )

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
