"""
Rate limiting policy and types.

The "what" of rate limiting: which operation a request is and how many of
those a client may make per minute. Enforcement lives in rate_limiter.py.
"""
from dataclasses import dataclass
from enum import Enum

from core.config import Settings


class OperationType(Enum):
    """Operation type for rate limiting."""

    READ = "read"
    WRITE = "write"


@dataclass
class RateLimitResult:
    """Result of a rate limit check with all info needed for headers."""

    allowed: bool
    limit: int  # Max requests in current window
    remaining: int  # Requests remaining in current window
    reset: int  # Unix timestamp when window resets
    retry_after: int  # Seconds until retry allowed (0 if allowed)


class RateLimitExceededError(Exception):
    """Raised when rate limit is exceeded."""

    def __init__(self, result: RateLimitResult) -> None:
        self.result = result
        super().__init__("Rate limit exceeded")


# Read-only HTTP methods; everything else mutates bookmarks
READ_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})

WINDOW_SECONDS = 60


def get_operation_type(method: str) -> OperationType:
    """Determine operation type from HTTP method."""
    if method.upper() in READ_METHODS:
        return OperationType.READ
    return OperationType.WRITE


def get_requests_per_minute(operation_type: OperationType, settings: Settings) -> int:
    """Look up the per-minute limit configured for an operation type."""
    if operation_type is OperationType.READ:
        return settings.rate_limit_read_per_minute
    return settings.rate_limit_write_per_minute
