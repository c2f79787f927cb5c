"""
Rate Limiting & Throttling
Per-IP request limits (slowapi) plus the per-client message throttle
the chat client applies between consecutive messages.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse
from typing import Callable, Dict, Optional
import logging
import time

from parche_ai.core.config import settings

logger = logging.getLogger(__name__)

# Initialize rate limiter
limiter = Limiter(key_func=get_remote_address)


# Rate limit definitions
CHAT_LIMIT = "60/minute"
ASSISTANT_LIMIT = "40/minute"
CATALOG_LIMIT = "120/minute"
HEALTH_LIMIT = "1000/minute"


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Return 429 JSON response when rate limit exceeded."""
    client_host = request.client.host if request.client else "unknown"
    logger.warning(f"Rate limit exceeded for {client_host}: {request.url.path}")

    return JSONResponse(
        status_code=429,
        content={
            "error": "too_many_requests",
            "message": "Demasiadas solicitudes. Por favor espera un momento antes de intentar de nuevo.",
            "retry_after": 60,
        },
        headers={"Retry-After": "60"},
    )


class MessageThrottle:
    """
    Rejects a message that arrives less than `min_interval` seconds after
    the previous accepted message from the same key.

    Rejected attempts do not reset the window. Once more than `max_keys`
    clients are tracked, keys whose window has elapsed are evicted.
    """

    def __init__(self, min_interval: float, clock: Optional[Callable[[], float]] = None,
                 max_keys: int = 1024):
        self.min_interval = min_interval
        self.max_keys = max_keys
        self._clock = clock or time.monotonic
        self._last_seen: Dict[str, float] = {}

    @property
    def tracked_keys(self) -> int:
        return len(self._last_seen)

    def allow(self, key: str) -> bool:
        now = self._clock()
        last = self._last_seen.get(key)
        if last is not None and now - last < self.min_interval:
            return False
        self._last_seen[key] = now
        if len(self._last_seen) > self.max_keys:
            self._evict_expired(now)
        return True

    def _evict_expired(self, now: float) -> None:
        expired = [k for k, seen in self._last_seen.items() if now - seen >= self.min_interval]
        for k in expired:
            del self._last_seen[k]
        if expired:
            logger.debug(f"Message throttle: evicted {len(expired)} idle clients, {len(self._last_seen)} tracked")

    def retry_after(self, key: str) -> float:
        """Seconds until `key` may send again (0 when allowed now)."""
        last = self._last_seen.get(key)
        if last is None:
            return 0.0
        return max(0.0, self.min_interval - (self._clock() - last))

    def reset(self) -> None:
        self._last_seen.clear()


message_throttle = MessageThrottle(settings.message_throttle_seconds)
