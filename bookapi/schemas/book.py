"""
Book Pydantic Schemas

These schemas define the shape of data for Book-related API operations.

A book references its author by ObjectId. Responses replace the id with
an AuthorSummary (id, firstName, lastName) when the author still exists.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from bookapi.schemas.author import AuthorSummary


class Genre(str, Enum):
    FICTION = "Fiction"
    NON_FICTION = "Non-Fiction"
    SCIENCE_FICTION = "Science Fiction"
    MYSTERY = "Mystery"
    ROMANCE = "Romance"
    THRILLER = "Thriller"
    BIOGRAPHY = "Biography"
    HISTORY = "History"
    SELF_HELP = "Self-Help"
    OTHER = "Other"


class BookBase(BaseModel):
    """
    Fields shared by requests and responses.

    Validation rules:
    - title: required, at most 200 characters
    - isbn: 10 to 13 digits, unique across books
    - publication_year: from 1000 up to the current year
    - pages: at least 1
    - price: not negative
    - description: required, at most 1000 characters
    """

    title: str = Field(..., min_length=1, max_length=200, examples=["1984"])
    isbn: str = Field(..., pattern=r"^[0-9]{10,13}$", examples=["9780451524935"])
    genre: Genre = Field(..., examples=["Science Fiction"])
    publication_year: int = Field(..., ge=1000, examples=[1949])
    pages: int = Field(..., ge=1, examples=[328])
    price: float = Field(..., ge=0, examples=[12.99])
    description: str = Field(..., min_length=1, max_length=1000)

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class BookCreate(BookBase):
    """Schema for creating or replacing a book."""

    author: str = Field(
        ...,
        description="Id of the book's author",
        examples=["65a1f0c2e4b0a1b2c3d4e5f6"],
    )

    @field_validator("author")
    @classmethod
    def author_must_be_object_id(cls, v: str) -> str:
        try:
            ObjectId(v)
        except (InvalidId, TypeError):
            raise ValueError("Valid author ID is required") from None
        return v

    @field_validator("publication_year")
    @classmethod
    def not_in_future(cls, v: int) -> int:
        if v > datetime.now(UTC).year:
            raise ValueError("Publication year cannot be in the future")
        return v

    def to_document(self) -> dict[str, Any]:
        """Serialize for MongoDB with the author stored as an ObjectId."""
        document = self.model_dump(by_alias=True, mode="json")
        document["author"] = ObjectId(self.author)
        return document


class BookResponse(BookBase):
    """Schema for book responses."""

    id: str
    author: AuthorSummary | str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
