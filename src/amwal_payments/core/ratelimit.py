"""
Per endpoint and credential request throttling.
"""

from __future__ import annotations

import hashlib
import threading
import time
from typing import Callable, Dict, Optional

from .environment import is_live_environment
from .errors import AmwalApiError

__all__ = [
    "RATE_LIMIT_WINDOW_SECONDS",
    "RateLimiter",
    "default_rate_limiter",
    "rate_limit_key",
]

RATE_LIMIT_WINDOW_SECONDS = 60.0


def rate_limit_key(endpoint: str, credential: str) -> str:
    return hashlib.md5((endpoint + credential).encode("utf-8")).hexdigest()


class RateLimiter:
    """
    Single slot limiter: at most one call per key every ``window`` seconds.

    Entries are never evicted. One instance is meant to be shared by every
    client in the process, see :data:`default_rate_limiter`.
    """

    def __init__(
        self,
        *,
        window: float = RATE_LIMIT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.window = window
        self._clock = clock
        self._last_call: Dict[str, float] = {}
        self._lock = threading.Lock()

    def check(self, endpoint: str, credential: str, *, environment: str) -> None:
        """
        Record a call for ``endpoint`` or raise :class:`AmwalApiError` when
        the previous one was less than ``window`` seconds ago.
        Non-live environments are never throttled.
        """
        if not is_live_environment(environment):
            return

        key = rate_limit_key(endpoint, credential)
        with self._lock:
            now = self._clock()
            last = self._last_call.get(key)
            if last is not None and now - last < self.window:
                raise AmwalApiError(
                    "Rate limit exceeded",
                    context={
                        "endpoint": endpoint,
                        "retry_after": round(self.window - (now - last), 3),
                        "environment": environment,
                    },
                )
            self._last_call[key] = now

    def last_call(self, endpoint: str, credential: str) -> Optional[float]:
        with self._lock:
            return self._last_call.get(rate_limit_key(endpoint, credential))

    def reset(self) -> None:
        with self._lock:
            self._last_call.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._last_call)


default_rate_limiter = RateLimiter()
