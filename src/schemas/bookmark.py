"""Pydantic schemas for bookmark endpoints."""
import html
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


def sanitize_text(value: str | None) -> str:
    """
    Escape HTML-significant characters so the text renders as plain text.

    Encodes &, <, >, " and ' - the result can never be parsed as markup.
    """
    if value is None:
        return ""
    return html.escape(value, quote=True)


class BookmarkCreate(BaseModel):
    """Normalized payload for creating a bookmark (see schemas.validators)."""

    title: str
    url: str
    description: str = ""
    rating: int


class BookmarkUpdate(BaseModel):
    """
    Normalized partial payload for updating a bookmark.

    Only the fields supplied by the client are set, so
    `model_dump(exclude_unset=True)` yields exactly the fields to change.
    """

    title: str | None = None
    url: str | None = None
    description: str | None = None
    rating: int | None = None


class BookmarkResponse(BaseModel):
    """
    Client-facing bookmark representation.

    Build it with serialize_bookmark(), which escapes the free-text fields.
    """

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    url: str
    description: str
    rating: int  # Lax int validation coerces "3" or 3.0 from the store

    @field_validator("description", mode="before")
    @classmethod
    def default_description(cls, v: Any) -> Any:
        """A missing description renders as an empty string."""
        return "" if v is None else v


def serialize_bookmark(bookmark: Any) -> BookmarkResponse:
    """
    Convert a stored bookmark (ORM object or mapping) into its response form.

    `title` and `description` are HTML-escaped, `rating` becomes an int, `id`
    and `url` pass through unchanged. The record itself is not modified.
    """
    response = BookmarkResponse.model_validate(bookmark)
    return response.model_copy(
        update={
            "title": sanitize_text(response.title),
            "description": sanitize_text(response.description),
        },
    )
