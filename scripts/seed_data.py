#!/usr/bin/env python3
"""
Database Seed Script

Populates MongoDB with sample authors and books for development.

USAGE:
    # From the project root, with MONGODB_URI set (or in .env)
    python scripts/seed_data.py

This script:
1. Connects to the database using app settings
2. Clears existing authors and books (user accounts are left alone)
3. Creates sample authors, then books referencing them

Every record goes through the same schemas as the API, so seeded data
obeys the same field rules.
"""

import asyncio
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from bookapi.config import get_settings
from bookapi.database import AUTHORS, BOOKS, MongoConnection
from bookapi.schemas import AuthorCreate, BookCreate
from bookapi.utils import utcnow

AUTHORS_DATA = [
    {
        "firstName": "F. Scott",
        "lastName": "Fitzgerald",
        "email": "fitzgerald@example.com",
        "birthDate": "1896-09-24",
        "nationality": "American",
        "biography": "American novelist, essayist and short story writer, best known "
                     "for his novels depicting the excess of the Jazz Age.",
        "awards": ["Pulitzer Prize", "National Book Award"],
    },
    {
        "firstName": "Harper",
        "lastName": "Lee",
        "email": "harper.lee@example.com",
        "birthDate": "1926-04-28",
        "nationality": "American",
        "biography": "American novelist best known for her 1960 novel "
                     "To Kill a Mockingbird.",
        "awards": ["Pulitzer Prize for Fiction", "Presidential Medal of Freedom"],
    },
    {
        "firstName": "George",
        "lastName": "Orwell",
        "email": "george.orwell@example.com",
        "birthDate": "1903-06-25",
        "nationality": "British",
        "biography": "English novelist, essayist, journalist and critic, known for "
                     "lucid prose and opposition to totalitarianism.",
        "awards": ["Prometheus Award", "Retro Hugo Award"],
    },
    {
        "firstName": "J.K.",
        "lastName": "Rowling",
        "email": "jk.rowling@example.com",
        "birthDate": "1965-07-31",
        "nationality": "British",
        "biography": "British author best known for writing the Harry Potter "
                     "fantasy series.",
        "awards": ["Hugo Award", "Nebula Award", "Bram Stoker Award"],
    },
    {
        "firstName": "Maya",
        "lastName": "Angelou",
        "email": "maya.angelou@example.com",
        "birthDate": "1928-04-04",
        "nationality": "American",
        "biography": "American poet, memoirist and civil rights activist who "
                     "published seven autobiographies.",
        "awards": ["Presidential Medal of Freedom", "National Medal of Arts"],
    },
]

# (author email, book fields)
BOOKS_DATA = [
    ("fitzgerald@example.com", {
        "title": "The Great Gatsby",
        "isbn": "9780743273565",
        "genre": "Fiction",
        "publicationYear": 1925,
        "pages": 180,
        "price": 12.99,
        "description": "A classic American novel set in the Jazz Age, following "
                       "Jay Gatsby and his obsession with Daisy Buchanan.",
    }),
    ("harper.lee@example.com", {
        "title": "To Kill a Mockingbird",
        "isbn": "9780061120084",
        "genre": "Fiction",
        "publicationYear": 1960,
        "pages": 281,
        "price": 14.99,
        "description": "Scout Finch's father defends a black man falsely accused "
                       "in 1930s Alabama.",
    }),
    ("george.orwell@example.com", {
        "title": "1984",
        "isbn": "9780451524935",
        "genre": "Science Fiction",
        "publicationYear": 1949,
        "pages": 328,
        "price": 13.99,
        "description": "A dystopian novel about totalitarian control and surveillance.",
    }),
    ("george.orwell@example.com", {
        "title": "Animal Farm",
        "isbn": "9780451526342",
        "genre": "Fiction",
        "publicationYear": 1945,
        "pages": 112,
        "price": 10.99,
        "description": "An allegorical novella about farm animals who rebel "
                       "against their human farmer.",
    }),
    ("jk.rowling@example.com", {
        "title": "Harry Potter and the Philosopher's Stone",
        "isbn": "9780747532699",
        "genre": "Fiction",
        "publicationYear": 1997,
        "pages": 223,
        "price": 16.99,
        "description": "The first novel in the Harry Potter series.",
    }),
    ("jk.rowling@example.com", {
        "title": "Harry Potter and the Chamber of Secrets",
        "isbn": "9780747538493",
        "genre": "Fiction",
        "publicationYear": 1998,
        "pages": 251,
        "price": 16.99,
        "description": "Harry returns to Hogwarts and discovers the Chamber of Secrets.",
    }),
    ("maya.angelou@example.com", {
        "title": "I Know Why the Caged Bird Sings",
        "isbn": "9780345514400",
        "genre": "Biography",
        "publicationYear": 1969,
        "pages": 289,
        "price": 15.99,
        "description": "The first volume of Maya Angelou's autobiography.",
    }),
]


async def clear_data(db) -> None:
    """Clear existing authors and books."""
    print("Clearing existing data...")
    await db[BOOKS].delete_many({})
    await db[AUTHORS].delete_many({})
    print("Data cleared.")


async def create_authors(db) -> dict[str, object]:
    """Create sample authors. Returns author ids keyed by email."""
    print("Creating authors...")
    author_ids = {}
    for data in AUTHORS_DATA:
        document = AuthorCreate.model_validate(data).to_document()
        document["createdAt"] = document["updatedAt"] = utcnow()
        result = await db[AUTHORS].insert_one(document)
        author_ids[document["email"]] = result.inserted_id

    print(f"Created {len(author_ids)} authors.")
    return author_ids


async def create_books(db, author_ids: dict[str, object]) -> int:
    """Create sample books referencing the seeded authors."""
    print("Creating books...")
    count = 0
    for author_email, data in BOOKS_DATA:
        book = BookCreate.model_validate({**data, "author": str(author_ids[author_email])})
        document = book.to_document()
        document["createdAt"] = document["updatedAt"] = utcnow()
        await db[BOOKS].insert_one(document)
        count += 1

    print(f"Created {count} books.")
    return count


async def seed_database(clear_existing: bool = True) -> None:
    """
    Main function to seed the database.

    Args:
        clear_existing: If True, clears existing authors and books first.
    """
    settings = get_settings()
    if not settings.database_configured:
        raise SystemExit("MONGODB_URI is not set; nothing to seed.")

    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)

    connection = MongoConnection(settings)
    await connection.connect()
    db = connection.database

    try:
        if clear_existing:
            await clear_data(db)

        author_ids = await create_authors(db)
        book_count = await create_books(db, author_ids)

        print("=" * 60)
        print("Database seeding completed successfully!")
        print("=" * 60)
        print("\nSummary:")
        print(f"  - Authors: {len(author_ids)}")
        print(f"  - Books: {book_count}")
        print(f"\nYou can now access the API at http://localhost:{settings.port}")
        print(f"API documentation at http://localhost:{settings.port}/docs")
    finally:
        connection.close()


if __name__ == "__main__":
    asyncio.run(seed_database())
