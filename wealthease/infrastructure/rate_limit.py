"""Per-client fixed window rate limiting"""

import threading
import time
from typing import Callable, Dict, Tuple


class FixedWindowRateLimiter:
    """
    Allow at most `max_requests` per key within each `window_seconds` window.

    Excess requests are rejected, never queued. The window for a key starts
    at its first request and resets once it has fully elapsed. Expired
    windows are swept at most once per `window_seconds`, so idle clients do
    not accumulate.
    """

    def __init__(
        self,
        name: str,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.name = name
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: Dict[str, Tuple[float, int]] = {}
        self._last_sweep = clock()
        self._lock = threading.Lock()

    def hit(self, key: str) -> bool:
        """Record a request for `key`; return False when it is over the limit"""
        now = self._clock()
        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._evict_expired(now)

            window_start, count = self._windows.get(key, (now, 0))
            if now - window_start >= self.window_seconds:
                window_start, count = now, 0

            count += 1
            self._windows[key] = (window_start, count)
            return count <= self.max_requests

    def _evict_expired(self, now: float) -> None:
        # Caller holds the lock
        expired = [k for k, (start, _) in self._windows.items() if now - start >= self.window_seconds]
        for key in expired:
            del self._windows[key]
        self._last_sweep = now
