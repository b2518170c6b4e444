"""
Author Pydantic Schemas

These schemas define the shape of data for Author-related API operations.

JSON uses camelCase keys (firstName, birthDate, ...), which are also the
keys stored in MongoDB. alias_generator=to_camel maps them onto the
snake_case attributes; populate_by_name lets Python code use either.
"""

from datetime import date, datetime, time, timezone
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    computed_field,
    field_validator,
)
from pydantic.alias_generators import to_camel


class AuthorBase(BaseModel):
    """
    Fields shared by create/update requests and responses.

    Validation rules:
    - first/last name: required, trimmed, at most 50 characters
    - email: valid address, stored lower-cased, unique across authors
    - biography: required, at most 2000 characters
    - awards: optional list of award names
    """

    first_name: str = Field(..., min_length=1, max_length=50, examples=["George"])
    last_name: str = Field(..., min_length=1, max_length=50, examples=["Orwell"])
    email: EmailStr = Field(..., examples=["george.orwell@example.com"])
    birth_date: date = Field(..., examples=["1903-06-25"])
    nationality: str = Field(..., min_length=1, examples=["British"])
    biography: str = Field(..., min_length=1, max_length=2000)
    awards: list[str] = Field(default_factory=list)

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("awards")
    @classmethod
    def strip_awards(cls, v: list[str]) -> list[str]:
        return [award.strip() for award in v if award.strip()]


class AuthorCreate(AuthorBase):
    """
    Schema for creating or replacing an author.

    PUT uses the same schema: an update must carry every required field.
    """

    def to_document(self) -> dict[str, Any]:
        """Serialize for MongoDB (camelCase keys, dates as UTC datetimes)."""
        document = self.model_dump(by_alias=True)
        document["birthDate"] = datetime.combine(
            self.birth_date, time.min, tzinfo=timezone.utc
        )
        return document


class AuthorResponse(AuthorBase):
    """Schema for author responses, built from a stored document."""

    id: str = Field(..., description="Unique identifier")
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("birth_date", mode="before")
    @classmethod
    def datetime_to_date(cls, v: Any) -> Any:
        if isinstance(v, datetime):
            return v.date()
        return v

    @computed_field(alias="fullName")
    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class AuthorSummary(BaseModel):
    """The author fields embedded in book responses."""

    id: str
    first_name: str
    last_name: str

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
