"""
Test Suite for Books API

Test Organization:
- conftest.py: Shared fixtures (in-memory database, app factory, sample data)
- test_app.py: Root, health, error body shapes, degraded mode
- test_auth.py: /api/auth register, login, logout, me, password
- test_auth_google.py: Google sign-in endpoints and profile exchange
- test_authors.py: /api/authors endpoints and the bearer token gate
- test_books.py: /api/books endpoints
- test_security.py: Password hashing and token signing
- test_users.py: UserRepository and user document invariants

Running Tests:
    pip install -e ".[test]"
    pytest
    pytest tests/test_auth.py -v
"""
