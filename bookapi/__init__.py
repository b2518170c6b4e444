"""
Books and Authors API Package

A REST API for books and authors with email/password and Google sign-in,
backed by MongoDB.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: MongoDB (motor) connection and indexes
- exceptions.py: Error taxonomy mapped to HTTP responses
- main.py: FastAPI application factory and configuration
- dependencies.py: Dependency injection functions (store, auth gate)
- models/: Document builders and projections
- schemas/: Pydantic request/response schemas
- routers/: API route handlers
- services/: Password hashing, tokens, OAuth, user repository, rate limiting
- utils/: Helper functions
"""

__version__ = "1.0.0"
