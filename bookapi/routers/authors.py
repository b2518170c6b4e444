"""
Authors Router

CRUD endpoints for authors.

Reads are public. Creating, updating and deleting an author require a
bearer token.
"""

import logging
from typing import List

from fastapi import APIRouter, status
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from bookapi.database import AUTHORS
from bookapi.dependencies import CurrentIdentity, Database
from bookapi.exceptions import DuplicateKey, NotFound
from bookapi.schemas import AuthorCreate, AuthorResponse, MessageResponse
from bookapi.utils import parse_object_id, utcnow, with_id

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/authors",
    tags=["Authors"],
    responses={
        404: {"description": "Author not found"},
    },
)


@router.get(
    "",
    response_model=List[AuthorResponse],
    summary="List all authors",
)
async def list_authors(db: Database) -> List[AuthorResponse]:
    documents = await db[AUTHORS].find({}).to_list(length=None)
    return [AuthorResponse.model_validate(with_id(doc)) for doc in documents]


@router.get(
    "/{author_id}",
    response_model=AuthorResponse,
    summary="Get an author by ID",
)
async def get_author(author_id: str, db: Database) -> AuthorResponse:
    document = await db[AUTHORS].find_one(
        {"_id": parse_object_id(author_id, "author")}
    )
    if document is None:
        raise NotFound("Author")
    return AuthorResponse.model_validate(with_id(document))


@router.post(
    "",
    response_model=AuthorResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new author",
)
async def create_author(
    author_data: AuthorCreate,
    identity: CurrentIdentity,
    db: Database,
) -> AuthorResponse:
    document = author_data.to_document()
    now = utcnow()
    document["createdAt"] = now
    document["updatedAt"] = now

    try:
        result = await db[AUTHORS].insert_one(document)
    except DuplicateKeyError:
        raise DuplicateKey(message="Email already exists") from None

    document["_id"] = result.inserted_id
    logger.info(f"Author {result.inserted_id} created by user {identity.user_id}")
    return AuthorResponse.model_validate(with_id(document))


@router.put(
    "/{author_id}",
    response_model=AuthorResponse,
    summary="Update an author",
)
async def update_author(
    author_id: str,
    author_data: AuthorCreate,
    identity: CurrentIdentity,
    db: Database,
) -> AuthorResponse:
    object_id = parse_object_id(author_id, "author")
    changes = author_data.to_document()
    changes["updatedAt"] = utcnow()

    try:
        document = await db[AUTHORS].find_one_and_update(
            {"_id": object_id},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
    except DuplicateKeyError:
        raise DuplicateKey(message="Email already exists") from None

    if document is None:
        raise NotFound("Author")
    return AuthorResponse.model_validate(with_id(document))


@router.delete(
    "/{author_id}",
    response_model=MessageResponse,
    summary="Delete an author",
)
async def delete_author(
    author_id: str,
    identity: CurrentIdentity,
    db: Database,
) -> MessageResponse:
    document = await db[AUTHORS].find_one_and_delete(
        {"_id": parse_object_id(author_id, "author")}
    )
    if document is None:
        raise NotFound("Author")

    logger.info(f"Author {author_id} deleted by user {identity.user_id}")
    return MessageResponse(message="Author deleted successfully")
