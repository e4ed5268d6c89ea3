"""Redis-based per-client rate limiter."""
import logging
import time
import uuid

from core.rate_limit_config import WINDOW_SECONDS, OperationType, RateLimitResult
from core.redis import get_redis_client

logger = logging.getLogger(__name__)


def _allow_all(limit: int) -> RateLimitResult:
    return RateLimitResult(allowed=True, limit=limit, remaining=limit, reset=0, retry_after=0)


class RedisRateLimiter:
    """Sliding window (per-minute) rate limiter keyed by client and operation type."""

    async def check(
        self,
        client_id: str,
        operation_type: OperationType,
        limit: int,
    ) -> RateLimitResult:
        """
        Check if request is allowed and return full rate limit info.

        Falls back to allowing requests if Redis is unavailable.
        """
        redis_client = get_redis_client()
        if (
            redis_client is None
            or not redis_client.is_connected
            or redis_client.sliding_window_sha is None
        ):
            logger.debug("redis_unavailable", extra={"operation": "rate_limit"})
            return _allow_all(limit)

        now = int(time.time())
        key = f"rate:{client_id}:{operation_type.value}:min"
        result = await redis_client.evalsha(
            redis_client.sliding_window_sha,
            1,  # number of keys
            key,
            now,
            WINDOW_SECONDS,
            limit,
            str(uuid.uuid4()),  # unique request ID
        )
        if result is None:
            return _allow_all(limit)

        allowed, remaining, retry_after = (int(value) for value in result)
        if not allowed:
            logger.warning(
                "rate_limit_exceeded",
                extra={"client_id": client_id, "operation": operation_type.value},
            )
        return RateLimitResult(
            allowed=bool(allowed),
            limit=limit,
            remaining=max(0, remaining),
            reset=now + WINDOW_SECONDS,
            retry_after=max(0, retry_after) if not allowed else 0,
        )


# Global rate limiter instance
rate_limiter = RedisRateLimiter()
