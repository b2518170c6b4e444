"""
Books Router

CRUD endpoints for books. All book routes are open; none require a token.

Responses embed the author's id, firstName and lastName in place of the
stored author id. A book whose author has been deleted reports
`"author": null`.
"""

import logging
from typing import Any, List

from fastapi import APIRouter, status
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from bookapi.database import AUTHORS, BOOKS
from bookapi.dependencies import Database
from bookapi.exceptions import DuplicateKey, NotFound
from bookapi.schemas import AuthorSummary, BookCreate, BookResponse, MessageResponse
from bookapi.utils import parse_object_id, utcnow, with_id

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/books",
    tags=["Books"],
    responses={
        404: {"description": "Book not found"},
    },
)

AUTHOR_SUMMARY_FIELDS = {"firstName": 1, "lastName": 1}


async def populate_authors(db, documents: list[dict[str, Any]]) -> List[BookResponse]:
    """Replace each book's author id with the author's name fields."""
    author_ids = {doc["author"] for doc in documents if doc.get("author")}
    authors: dict[Any, AuthorSummary] = {}
    if author_ids:
        cursor = db[AUTHORS].find(
            {"_id": {"$in": list(author_ids)}},
            AUTHOR_SUMMARY_FIELDS,
        )
        for author in await cursor.to_list(length=None):
            authors[author["_id"]] = AuthorSummary.model_validate(with_id(author))

    books = []
    for doc in documents:
        data = with_id(doc)
        data["author"] = authors.get(doc.get("author"))
        books.append(BookResponse.model_validate(data))
    return books


@router.get(
    "",
    response_model=List[BookResponse],
    summary="List all books",
)
async def list_books(db: Database) -> List[BookResponse]:
    documents = await db[BOOKS].find({}).to_list(length=None)
    return await populate_authors(db, documents)


@router.get(
    "/{book_id}",
    response_model=BookResponse,
    summary="Get a book by ID",
)
async def get_book(book_id: str, db: Database) -> BookResponse:
    document = await db[BOOKS].find_one({"_id": parse_object_id(book_id, "book")})
    if document is None:
        raise NotFound("Book")
    [book] = await populate_authors(db, [document])
    return book


@router.post(
    "",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new book",
)
async def create_book(book_data: BookCreate, db: Database) -> BookResponse:
    document = book_data.to_document()
    now = utcnow()
    document["createdAt"] = now
    document["updatedAt"] = now

    try:
        result = await db[BOOKS].insert_one(document)
    except DuplicateKeyError:
        raise DuplicateKey(message="ISBN already exists") from None

    document["_id"] = result.inserted_id
    logger.info(f"Book {result.inserted_id} created")
    [book] = await populate_authors(db, [document])
    return book


@router.put(
    "/{book_id}",
    response_model=BookResponse,
    summary="Update a book",
)
async def update_book(book_id: str, book_data: BookCreate, db: Database) -> BookResponse:
    object_id = parse_object_id(book_id, "book")
    changes = book_data.to_document()
    changes["updatedAt"] = utcnow()

    try:
        document = await db[BOOKS].find_one_and_update(
            {"_id": object_id},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
    except DuplicateKeyError:
        raise DuplicateKey(message="ISBN already exists") from None

    if document is None:
        raise NotFound("Book")
    [book] = await populate_authors(db, [document])
    return book


@router.delete(
    "/{book_id}",
    response_model=MessageResponse,
    summary="Delete a book",
)
async def delete_book(book_id: str, db: Database) -> MessageResponse:
    document = await db[BOOKS].find_one_and_delete(
        {"_id": parse_object_id(book_id, "book")}
    )
    if document is None:
        raise NotFound("Book")

    logger.info(f"Book {book_id} deleted")
    return MessageResponse(message="Book deleted successfully")
