"""
In-memory rate limiting for the Agrofix storefront.

Guards the admin login against password guessing. Counts attempts per
(client IP, route) in a sliding window; state lives in the process, so each
worker keeps its own counters.
"""
import time
import logging
from collections import deque
from typing import Callable, Optional

from fastapi import HTTPException, Request

logger = logging.getLogger(__name__)


class RateLimiter:
    """Sliding-window attempt counter keyed by arbitrary strings."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}

    def _expire(self, key: str, window_seconds: int) -> deque[float]:
        """Drop attempts older than the window; keys left with none are forgotten."""
        hits = self._hits.get(key)
        if hits is None:
            return deque()
        cutoff = self._clock() - window_seconds
        while hits and hits[0] <= cutoff:
            hits.popleft()
        if not hits:
            del self._hits[key]
        return hits

    def check(self, key: str, max_requests: int, window_seconds: int) -> bool:
        """Record an attempt; False when the key is already at its limit."""
        hits = self._expire(key, window_seconds)
        if len(hits) >= max_requests:
            return False
        self._hits.setdefault(key, hits).append(self._clock())
        return True

    def __len__(self) -> int:
        """Number of keys currently tracked."""
        return len(self._hits)

    def remaining(self, key: str, max_requests: int, window_seconds: int) -> int:
        return max(0, max_requests - len(self._expire(key, window_seconds)))

    def reset(self, key: Optional[str] = None) -> None:
        if key is None:
            self._hits.clear()
        else:
            self._hits.pop(key, None)


# Shared by every route using rate_limit()
limiter = RateLimiter()


def rate_limit(max_requests: Callable[[], int], window_seconds: Callable[[], int]):
    """
    FastAPI dependency factory.

    Limits are passed as callables so they are read from settings per request:

        @router.post("/auth")
        async def login(_=Depends(rate_limit(lambda: settings.admin_auth_max_attempts,
                                             lambda: settings.admin_auth_window_seconds))):
            ...
    """
    async def _check_rate_limit(request: Request):
        client_ip = request.client.host if request.client else "unknown"
        key = f"{client_ip}:{request.url.path}"
        limit, window = max_requests(), window_seconds()

        if not limiter.check(key, limit, window):
            logger.warning(f"Rate limit exceeded: {client_ip} on {request.url.path} ({limit}/{window}s)")
            raise HTTPException(
                status_code=429,
                detail=f"Too many attempts. Maximum {limit} per {window} seconds. Try again later.",
                headers={
                    "Retry-After": str(window),
                    "X-RateLimit-Limit": str(limit),
                    "X-RateLimit-Remaining": str(limiter.remaining(key, limit, window)),
                },
            )

    return _check_rate_limit
