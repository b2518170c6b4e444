"""
Document models for the Books API.

MongoDB stores plain documents; this package holds the helpers that
build and project them. Request/response shapes live in bookapi.schemas.
"""

from bookapi.models.user import AuthProvider, new_user_document, public_user

__all__ = ["AuthProvider", "new_user_document", "public_user"]
