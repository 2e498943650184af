"""Fixed-window request counter keyed by caller address."""
from __future__ import annotations

import threading
import time
from collections import OrderedDict
from typing import Callable, Optional, Tuple

from fastapi import Request

from .config import RATE_LIMIT_MAX_KEYS, RATE_LIMIT_MAX_REQUESTS, RATE_LIMIT_WINDOW_SECONDS
from .logging_config import get_logger

logger = get_logger(__name__)


class RateLimiter:
    """In-process table of ``key -> (count, expires_at)``.

    An entry lives ``window_seconds`` from the first request that created it;
    when it expires the counter starts again from zero. The table holds at most
    ``max_keys`` entries and drops the least recently used one when full.
    State is per process and is lost on restart.
    """

    def __init__(
        self,
        max_keys: int = RATE_LIMIT_MAX_KEYS,
        window_seconds: float = RATE_LIMIT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_keys = max_keys
        self.window_seconds = window_seconds
        self._clock = clock
        self._entries: "OrderedDict[str, Tuple[int, float]]" = OrderedDict()
        self._lock = threading.Lock()

    def check(self, key: str, max_requests: int = RATE_LIMIT_MAX_REQUESTS) -> bool:
        """Count one request for ``key``; return False once the ceiling is reached."""

        now = self._clock()
        with self._lock:
            count, expires_at = self._entries.get(key, (0, now + self.window_seconds))
            if expires_at <= now:
                count, expires_at = 0, now + self.window_seconds

            allowed = count < max_requests
            self._entries[key] = (count + 1 if allowed else count, expires_at)
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_keys:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("RateLimiter: evicted %s", evicted)
            return allowed

    def reset(self, key: Optional[str] = None) -> None:
        with self._lock:
            if key is None:
                self._entries.clear()
            else:
                self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)


_RATE_LIMITER = RateLimiter()


def get_rate_limiter() -> RateLimiter:
    """FastAPI dependency; override it to plug in an external counter with the same ``check``."""

    return _RATE_LIMITER


def client_key(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


__all__ = ["RateLimiter", "get_rate_limiter", "client_key"]
