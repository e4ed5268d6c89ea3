"""Exceptions raised by bookmark validation and access operations."""


class BookmarkValidationError(Exception):
    """
    Base exception for rejected bookmark payloads.

    The message is user facing and is returned verbatim in 400 responses.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidPayloadError(BookmarkValidationError):
    """Raised when the request body is not a JSON object."""

    def __init__(self) -> None:
        super().__init__("Request body must be a JSON object")


class MissingFieldError(BookmarkValidationError):
    """Raised when a required field is absent, null, or blank."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"'{field}' is required")


class InvalidFieldTypeError(BookmarkValidationError):
    """Raised when a text field holds a non-string value."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"'{field}' must be a string")


class InvalidRatingError(BookmarkValidationError):
    """Raised when rating is not an integer between 0 and 5."""

    def __init__(self) -> None:
        super().__init__("'rating' must be a number between 0 and 5")


class InvalidUrlError(BookmarkValidationError):
    """Raised when url is not a well-formed http(s) URI."""

    def __init__(self) -> None:
        super().__init__("'url' must be a valid URL")


class EmptyUpdateError(BookmarkValidationError):
    """Raised when an update payload contains none of the updatable fields."""

    def __init__(self) -> None:
        super().__init__(
            "Request body must contain either 'title', 'url', 'description' or 'rating'",
        )


class BookmarkNotFoundError(Exception):
    """Raised when no bookmark exists with the requested id."""

    def __init__(self, bookmark_id: str) -> None:
        self.bookmark_id = bookmark_id
        super().__init__("Bookmark not found")
