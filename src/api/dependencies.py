"""FastAPI dependencies for injection."""
from typing import Any

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import require_api_token
from core.config import Settings, get_settings
from core.rate_limit_config import (
    RateLimitExceededError,
    RateLimitResult,
    get_operation_type,
    get_requests_per_minute,
)
from core.rate_limiter import rate_limiter
from db.session import get_async_session
from services.bookmark_store import BookmarkStore, SqlAlchemyBookmarkStore
from services.exceptions import InvalidPayloadError


async def get_bookmark_store(
    db: AsyncSession = Depends(get_async_session),
) -> BookmarkStore:
    """Build the storage collaborator for this request's session."""
    return SqlAlchemyBookmarkStore(db)


async def read_json_payload(request: Request) -> Any:
    """
    Decode the request body as JSON.

    Runs as an endpoint dependency, after the router-level token gate. Bodies
    that are not valid JSON raise InvalidPayloadError.
    """
    try:
        return await request.json()
    except ValueError as e:
        raise InvalidPayloadError from e


async def check_rate_limit(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> RateLimitResult:
    """
    Dependency that enforces per-client rate limits.

    Stores result in request.state for middleware to add headers.
    Raises RateLimitExceededError for 429 responses (handled by exception handler).
    """
    operation_type = get_operation_type(request.method)
    client_id = request.client.host if request.client else "unknown"

    result = await rate_limiter.check(
        client_id,
        operation_type,
        get_requests_per_minute(operation_type, settings),
    )

    if not result.allowed:
        raise RateLimitExceededError(result)

    # Store result in request.state for RateLimitHeadersMiddleware
    request.state.rate_limit_info = {
        "limit": result.limit,
        "remaining": result.remaining,
        "reset": result.reset,
    }

    return result


__all__ = [
    "check_rate_limit",
    "get_async_session",
    "get_bookmark_store",
    "get_settings",
    "read_json_payload",
    "require_api_token",
]
