"""
Document helpers shared by the repositories and routers.
"""

from datetime import UTC, datetime
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId

from bookapi.exceptions import ValidationFailed


def utcnow() -> datetime:
    return datetime.now(UTC)


def parse_object_id(value: str, resource: str = "resource") -> ObjectId:
    """
    Convert a path parameter into an ObjectId.

    Raises:
        ValidationFailed: If the value is not a valid ObjectId
    """
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise ValidationFailed(
            f"Invalid {resource} ID",
            errors=[{"field": "id", "msg": f"'{value}' is not a valid ObjectId"}],
        ) from None


def duplicate_key_field(exc: Exception) -> str | None:
    """
    Name the field a DuplicateKeyError was raised for, when the driver says.
    """
    details = getattr(exc, "details", None) or {}
    key_value = details.get("keyValue") or details.get("keyPattern")
    if key_value:
        return next(iter(key_value))
    return None


def with_id(document: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of a stored document with `_id` exposed as a string `id`."""
    data = dict(document)
    data["id"] = str(data.pop("_id"))
    return data
