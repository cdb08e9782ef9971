"""
Fixed-window rate limiting for sign-in attempts, backed by Redis.

Circuit Breaker Pattern:
  On Redis failure (or with Redis disabled) the limiter "fails open" and
  admits the request. Credentials are still checked by the database, so an
  outage degrades brute-force protection but never blocks sign-in.

Window accounting:
  INCR ratelimit:{scope}:{key}; the first hit in a window sets EXPIRE.
  The request is admitted while the counter is <= limit.
"""

from typing import Awaitable, Callable, Optional

import redis.asyncio as redis
from fastapi import Depends, HTTPException, Request, status

from marketplace.core.config import get_settings
from marketplace.core.logging import get_logger
from marketplace.core.metrics import record_rate_limited, redis_connection_errors
from marketplace.infrastructure.redis_client import get_redis

logger = get_logger(__name__)
settings = get_settings()

ClientFactory = Callable[[], Awaitable[Optional[redis.Redis]]]


class RateLimiter:
    def __init__(self, scope: str, limit: int, window_seconds: int, client_factory: ClientFactory = get_redis):
        self.scope = scope
        self.limit = limit
        self.window_seconds = window_seconds
        self._client_factory = client_factory

    def _key(self, key: str) -> str:
        return f"ratelimit:{self.scope}:{key}"

    async def hit(self, key: str) -> bool:
        """Count one attempt for `key`. Returns False once the window's budget is spent."""
        client = await self._client_factory()
        if client is None:
            return True

        redis_key = self._key(key)
        try:
            count = await client.incr(redis_key)
            if count == 1:
                await client.expire(redis_key, self.window_seconds)
        except redis.RedisError as e:
            redis_connection_errors.inc()
            logger.warning("rate_limiter_unavailable", scope=self.scope, error=str(e))
            return True

        return count <= self.limit


_signin_limiter = RateLimiter(
    scope="signin",
    limit=settings.SIGNIN_RATE_LIMIT,
    window_seconds=settings.SIGNIN_RATE_WINDOW_SECONDS,
)


def get_signin_limiter() -> RateLimiter:
    return _signin_limiter


async def enforce_signin_rate_limit(
    request: Request,
    limiter: RateLimiter = Depends(get_signin_limiter),
) -> None:
    client_key = request.client.host if request.client else "unknown"
    if not await limiter.hit(client_key):
        record_rate_limited(limiter.scope)
        logger.warning("signin_rate_limited", client=client_key)
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many login attempts. Please try again later.",
            headers={"Retry-After": str(limiter.window_seconds)},
        )
