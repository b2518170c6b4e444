"""
API Routers Package

Router Structure:
- auth.py: /api/auth/* endpoints (registration, login, Google sign-in)
- authors.py: /api/authors/* endpoints
- books.py: /api/books/* endpoints

Each router is imported and registered in main.py.
"""

from bookapi.routers.auth import router as auth_router
from bookapi.routers.authors import router as authors_router
from bookapi.routers.books import router as books_router

__all__ = [
    "auth_router",
    "authors_router",
    "books_router",
]
