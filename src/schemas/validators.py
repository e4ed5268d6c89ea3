"""
Validation rules for bookmark create and update payloads.

Create and update share one rule set, parameterized by ValidationMode:

- CREATE requires title, url and rating; description defaults to ''.
- UPDATE requires at least one recognized field; absent fields stay untouched.

A field counts as supplied when its key is in the payload. Values are never
tested for truthiness, so `rating: 0` and `description: ""` are real updates.
"""
from collections.abc import Mapping
from enum import Enum
from typing import Annotated, Any

from pydantic import AnyUrl, TypeAdapter, UrlConstraints, ValidationError

from models.bookmark import MAX_RATING, MIN_RATING
from schemas.bookmark import BookmarkCreate, BookmarkUpdate
from services.exceptions import (
    EmptyUpdateError,
    InvalidFieldTypeError,
    InvalidPayloadError,
    InvalidRatingError,
    InvalidUrlError,
    MissingFieldError,
)


class ValidationMode(Enum):
    """Which fields are mandatory for a payload."""

    CREATE = "create"
    UPDATE = "update"


# Fields a client may set, in the order they are reported when missing
BOOKMARK_FIELDS = ("title", "url", "description", "rating")
REQUIRED_FIELDS = ("title", "url", "rating")

ALLOWED_URL_PREFIXES = ("http://", "https://")

# HttpUrl without its 2083 character cap
WebUrl = Annotated[
    AnyUrl,
    UrlConstraints(allowed_schemes=["http", "https"], host_required=True),
]

_web_url_adapter = TypeAdapter(WebUrl)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def normalize_rating(value: Any) -> int:
    """
    Validate a rating and return it as an int.

    Accepts ints (and integral floats such as 3.0, which JSON can produce)
    in [0, 5]. Booleans and numeric strings are rejected.

    Raises:
        InvalidRatingError: If the value is not an integer in range.
    """
    if isinstance(value, bool):
        raise InvalidRatingError
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int) or not MIN_RATING <= value <= MAX_RATING:
        raise InvalidRatingError
    return value


def normalize_url(value: Any) -> str:
    """
    Validate a web URL and return it trimmed.

    The URL must use the http or https scheme, name a host and contain no
    whitespace. Length is not limited. pydantic does the parsing, but the
    caller's string is returned as-is rather than the normalized form (which
    would add a trailing slash to bare domains).

    Raises:
        InvalidUrlError: If the value is not a valid http(s) URL.
    """
    if not isinstance(value, str):
        raise InvalidUrlError
    url = value.strip()
    if any(char.isspace() for char in url):
        raise InvalidUrlError
    if not url.lower().startswith(ALLOWED_URL_PREFIXES):
        raise InvalidUrlError
    try:
        _web_url_adapter.validate_python(url)
    except ValidationError as e:
        raise InvalidUrlError from e
    return url


def normalize_title(value: Any) -> str:
    """Validate and trim a title (blank titles are rejected earlier as missing)."""
    if not isinstance(value, str):
        raise InvalidFieldTypeError("title")
    return value.strip()


def normalize_description(value: Any) -> str:
    """Validate a description; null clears it to an empty string."""
    if value is None:
        return ""
    if not isinstance(value, str):
        raise InvalidFieldTypeError("description")
    return value


def validate_bookmark_payload(
    payload: Mapping[str, Any],
    mode: ValidationMode,
) -> dict[str, Any]:
    """
    Validate a raw bookmark payload and return its normalized fields.

    Unrecognized keys (including `id`) are dropped. In UPDATE mode the result
    holds only the supplied fields; in CREATE mode it always has all four.

    Raises:
        InvalidPayloadError: If the payload is not a mapping.
        EmptyUpdateError: UPDATE mode with no recognized field present.
        MissingFieldError: A required field is absent (CREATE) or null/blank.
        InvalidRatingError: rating is not an integer in [0, 5].
        InvalidUrlError: url is not a well-formed http(s) URL.
        InvalidFieldTypeError: title or description is not a string.
    """
    if not isinstance(payload, Mapping):
        raise InvalidPayloadError

    if mode is ValidationMode.UPDATE and not any(field in payload for field in BOOKMARK_FIELDS):
        raise EmptyUpdateError

    for field in REQUIRED_FIELDS:
        if field in payload:
            if _is_blank(payload[field]):
                raise MissingFieldError(field)
        elif mode is ValidationMode.CREATE:
            raise MissingFieldError(field)

    normalized: dict[str, Any] = {}
    if "rating" in payload:
        normalized["rating"] = normalize_rating(payload["rating"])
    if "url" in payload:
        normalized["url"] = normalize_url(payload["url"])
    if "title" in payload:
        normalized["title"] = normalize_title(payload["title"])
    if "description" in payload:
        normalized["description"] = normalize_description(payload["description"])
    elif mode is ValidationMode.CREATE:
        normalized["description"] = ""
    return normalized


def validate_bookmark_create(payload: Mapping[str, Any]) -> BookmarkCreate:
    """Validate a create payload."""
    return BookmarkCreate(**validate_bookmark_payload(payload, ValidationMode.CREATE))


def validate_bookmark_update(payload: Mapping[str, Any]) -> BookmarkUpdate:
    """Validate a partial update payload; unset fields stay unset on the model."""
    return BookmarkUpdate(**validate_bookmark_payload(payload, ValidationMode.UPDATE))
