"""FastAPI application entry point."""
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from api.routers import bookmarks, health
from core.auth import UnauthorizedError
from core.config import get_settings
from core.logging_config import configure_logging
from core.rate_limit_config import RateLimitExceededError
from core.redis import RedisClient, set_redis_client
from services.exceptions import BookmarkNotFoundError, BookmarkValidationError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan - startup and shutdown."""
    app_settings = get_settings()
    configure_logging(app_settings)

    # Startup: Connect to Redis
    redis_client = RedisClient(url=app_settings.redis_url, enabled=app_settings.redis_enabled)
    await redis_client.connect()
    set_redis_client(redis_client)

    yield

    # Shutdown: Clean up Redis
    await redis_client.close()
    set_redis_client(None)


SECURITY_HEADERS = {
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        """Process request and add security headers to response."""
        response = await call_next(request)
        response.headers.update(SECURITY_HEADERS)
        return response


class RateLimitHeadersMiddleware(BaseHTTPMiddleware):
    """Add rate limit headers to successful responses."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        """Process request and add rate limit headers to response."""
        response = await call_next(request)

        # 429 responses are handled by exception handler, not middleware
        info = getattr(request.state, "rate_limit_info", None)
        if info:
            response.headers["X-RateLimit-Limit"] = str(info["limit"])
            response.headers["X-RateLimit-Remaining"] = str(info["remaining"])
            response.headers["X-RateLimit-Reset"] = str(info["reset"])

        return response


def error_response(status_code: int, message: str, **kwargs) -> JSONResponse:
    """Build the `{"error": {"message": ...}}` body every API error uses."""
    return JSONResponse(
        status_code=status_code,
        content={"error": {"message": message}},
        **kwargs,
    )


app_settings = get_settings()

app = FastAPI(
    title="Bookmarks API",
    description="Create, list, update and delete rated bookmarks.",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(BookmarkValidationError)
async def bookmark_validation_exception_handler(
    _request: Request, exc: BookmarkValidationError,
) -> JSONResponse:
    """Reject invalid bookmark payloads with the field-specific message."""
    logger.warning("Invalid bookmark payload: %s", exc.message)
    return error_response(400, exc.message)


@app.exception_handler(BookmarkNotFoundError)
async def bookmark_not_found_exception_handler(
    _request: Request, exc: BookmarkNotFoundError,
) -> JSONResponse:
    """Render a missing bookmark as 404."""
    return error_response(404, str(exc))


@app.exception_handler(UnauthorizedError)
async def unauthorized_exception_handler(
    _request: Request, exc: UnauthorizedError,
) -> JSONResponse:
    """Reject requests without a valid bearer token."""
    return JSONResponse(
        status_code=401,
        content={"error": str(exc)},
        headers={"WWW-Authenticate": "Bearer"},
    )


@app.exception_handler(RateLimitExceededError)
async def rate_limit_exception_handler(
    _request: Request, exc: RateLimitExceededError,
) -> JSONResponse:
    """Handle rate limit exceeded with proper headers."""
    return error_response(
        429,
        "Rate limit exceeded. Please try again later.",
        headers={
            "Retry-After": str(exc.result.retry_after),
            "X-RateLimit-Limit": str(exc.result.limit),
            "X-RateLimit-Remaining": "0",
            "X-RateLimit-Reset": str(exc.result.reset),
        },
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    """
    Last-resort handler for storage failures and bugs.

    The exception text is only exposed when DEBUG_ERRORS is enabled. Starlette
    runs this handler outside the middleware stack, so the security headers
    are set here directly.
    """
    logger.exception("Unhandled error", exc_info=exc)
    message = str(exc) if get_settings().debug_errors else "server error"
    return error_response(500, message, headers=SECURITY_HEADERS)


# Rate limit headers middleware (runs first, adds headers to successful responses)
app.add_middleware(RateLimitHeadersMiddleware)

# Security headers middleware (runs after CORS, adds headers to responses)
app.add_middleware(SecurityHeadersMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=app_settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Location"],
)

app.include_router(health.router)
app.include_router(bookmarks.router)
