"""Bearer token gate for the bookmarks API."""
import logging
import secrets

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.config import Settings, get_settings

logger = logging.getLogger(__name__)

# HTTP Bearer token scheme
security = HTTPBearer(auto_error=False)


class UnauthorizedError(Exception):
    """Raised when a request does not carry the configured API token."""

    def __init__(self) -> None:
        super().__init__("Unauthorized request")


def is_valid_token(token: str, settings: Settings) -> bool:
    """Compare a presented token against the configured one in constant time."""
    if not settings.api_token:
        return False
    return secrets.compare_digest(token.encode(), settings.api_token.encode())


async def require_api_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    settings: Settings = Depends(get_settings),
) -> None:
    """
    Dependency that rejects requests without a valid bearer token.

    In DEV_MODE, every request is let through.
    """
    if settings.dev_mode:
        return

    if credentials is None or not is_valid_token(credentials.credentials, settings):
        logger.warning("Unauthorized request")
        raise UnauthorizedError
