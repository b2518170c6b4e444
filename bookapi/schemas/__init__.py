"""
Pydantic Schemas Package

Request/response validation models.

Schema Naming Convention:
- XxxBase: Shared fields
- XxxCreate: Fields required when creating (or replacing) a record
- XxxResponse: Fields returned in API responses
"""

from bookapi.schemas.author import (
    AuthorBase,
    AuthorCreate,
    AuthorResponse,
    AuthorSummary,
)
from bookapi.schemas.book import (
    BookBase,
    BookCreate,
    BookResponse,
    Genre,
)
from bookapi.schemas.user import (
    AuthResponse,
    AuthURLResponse,
    LoginRequest,
    MessageResponse,
    PasswordChange,
    RegisterRequest,
    UserPublic,
)

__all__ = [
    "AuthorBase",
    "AuthorCreate",
    "AuthorResponse",
    "AuthorSummary",
    "BookBase",
    "BookCreate",
    "BookResponse",
    "Genre",
    "AuthResponse",
    "AuthURLResponse",
    "LoginRequest",
    "MessageResponse",
    "PasswordChange",
    "RegisterRequest",
    "UserPublic",
]
