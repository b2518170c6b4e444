"""
Database Configuration Module

This module manages the MongoDB connection for the Books API using motor,
the asyncio driver.

Connection Lifecycle
====================
- One AsyncIOMotorClient per process, created in the app lifespan
- The client keeps its own connection pool; handlers never open connections
- With no MONGODB_URI the API still starts ("degraded mode") and
  get_database() raises StoreUnavailable for every data-dependent request

Uniqueness (user email, author email, book ISBN) is enforced by unique
indexes created at startup, not by application-level locking.
"""

import logging

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING

from bookapi.config import Settings
from bookapi.exceptions import StoreUnavailable

logger = logging.getLogger(__name__)

USERS = "users"
AUTHORS = "authors"
BOOKS = "books"


class MongoConnection:
    """
    Holds the process-wide client and database handle.

    Created once by the lifespan handler and stored on app.state.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.client: AsyncIOMotorClient | None = None
        self.database: AsyncIOMotorDatabase | None = None

    @property
    def connected(self) -> bool:
        return self.database is not None

    async def connect(self) -> None:
        if not self.settings.database_configured:
            logger.warning(
                "MONGODB_URI not set. Starting without a database "
                "(data routes will fail)."
            )
            return

        self.client = AsyncIOMotorClient(self.settings.mongodb_uri)
        default_db = self.client.get_default_database(
            default=self.settings.mongodb_db_name
        )
        self.database = default_db
        logger.info(f"Connected to MongoDB database '{default_db.name}'")

        await ensure_indexes(self.database)

    def close(self) -> None:
        if self.client is not None:
            self.client.close()
            logger.info("MongoDB connection closed")
        self.client = None
        self.database = None

    async def ping(self) -> str:
        """Report the store state for the health endpoint."""
        if self.database is None:
            return "not configured"
        try:
            await self.database.command("ping")
        except Exception as e:
            logger.warning(f"Database ping failed: {e}")
            return "unreachable"
        return "connected"


async def ensure_indexes(database: AsyncIOMotorDatabase) -> None:
    """
    Create the indexes the API relies on.

    create_index is idempotent, so this runs on every startup.
    """
    await database[USERS].create_index([("email", ASCENDING)], unique=True)
    await database[USERS].create_index(
        [("provider", ASCENDING), ("providerId", ASCENDING)]
    )
    await database[AUTHORS].create_index([("email", ASCENDING)], unique=True)
    await database[BOOKS].create_index([("isbn", ASCENDING)], unique=True)
    await database[BOOKS].create_index([("author", ASCENDING)])


def get_database(request: Request) -> AsyncIOMotorDatabase:
    """
    Database dependency for FastAPI.

    Raises:
        StoreUnavailable: When the API runs without a configured store
    """
    connection: MongoConnection | None = getattr(request.app.state, "mongo", None)
    if connection is None or connection.database is None:
        raise StoreUnavailable()
    return connection.database
