"""
API Error Taxonomy

Every failure a route can report maps to one of these classes. The
exception handlers registered in main.py turn them into JSON bodies of
the form {"message": ..., ...} with the class's status code.

Route handlers raise these directly; store and library errors with a
known shape (duplicate key, invalid ObjectId, schema validation) are
translated into them close to where they happen.
"""

from typing import Any


class APIError(Exception):
    """Base class for errors that are reported to the client."""

    status_code: int = 500
    default_message: str = "Something went wrong!"

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, Any]] | None = None,
        detail: str | None = None,
    ):
        self.message = message or self.default_message
        self.errors = errors
        self.detail = detail
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"message": self.message}
        if self.errors is not None:
            body["errors"] = self.errors
        if self.detail is not None:
            body["error"] = self.detail
        return body


class ValidationFailed(APIError):
    """Malformed or missing input."""

    status_code = 400
    default_message = "Validation failed"


class InvalidCredentials(APIError):
    """
    Login failed.

    Raised for both an unknown email and a wrong password so that the
    response does not reveal which accounts exist.
    """

    status_code = 400
    default_message = "Invalid credentials"


class EmailInUse(APIError):
    status_code = 400
    default_message = "Email already in use"


class DuplicateKey(APIError):
    """A unique index rejected the write."""

    status_code = 400
    default_message = "Duplicate value"

    def __init__(self, field: str | None = None, message: str | None = None):
        if message is None and field:
            message = f"{field} already exists"
        super().__init__(message)


class NotFound(APIError):
    status_code = 404
    default_message = "Not found"

    def __init__(self, resource: str | None = None, message: str | None = None):
        if message is None and resource:
            message = f"{resource} not found"
        super().__init__(message)


class NotConfigured(APIError):
    """OAuth requested while the provider credentials are absent."""

    status_code = 400
    default_message = "Google OAuth is not configured"


class ServerMisconfigured(APIError):
    """A required server-side secret is missing."""

    status_code = 500
    default_message = "Server error"


class Unauthorized(APIError):
    status_code = 401
    default_message = "Not authenticated"


class StoreUnavailable(APIError):
    """The document store is not configured for this process."""

    status_code = 503
    default_message = "Database not configured"


class InternalError(APIError):
    status_code = 500
    default_message = "Something went wrong!"


class OAuthError(Exception):
    """
    The identity provider did not yield a usable profile.

    Not an APIError: the callback route turns it into a redirect to the
    configured failure page rather than a JSON error body.
    """

    def __init__(self, reason: str, message: str | None = None):
        self.reason = reason
        super().__init__(message or reason)
