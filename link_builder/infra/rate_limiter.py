"""Token bucket shared by the validator's HEAD probe workers."""

from __future__ import annotations

import time
from threading import Lock
from typing import Callable


class RateLimiter:
    """Blocking token bucket allowing ``rate`` permits per second.

    ``burst`` is the bucket capacity; the bucket starts full. Callers from any
    thread may call :meth:`wait`; the lock is only held while updating the
    bucket, never while sleeping.
    """

    def __init__(
        self,
        rate: float = 10.0,
        burst: int = 1,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if rate <= 0:
            raise ValueError("rate must be positive")
        if burst < 1:
            raise ValueError("burst must be >= 1")
        self.rate = float(rate)
        self.burst = burst
        self._clock = clock
        self._sleep = sleep
        self._tokens = float(burst)
        self._updated = clock()
        self._lock = Lock()

    def _reserve(self) -> float:
        """Take a token, returning how long the caller must wait before using it."""

        with self._lock:
            now = self._clock()
            elapsed = max(0.0, now - self._updated)
            self._tokens = min(float(self.burst), self._tokens + elapsed * self.rate)
            self._updated = now
            self._tokens -= 1.0
            if self._tokens >= 0:
                return 0.0
            return -self._tokens / self.rate

    def wait(self) -> float:
        delay = self._reserve()
        if delay > 0:
            self._sleep(delay)
        return delay


__all__ = ["RateLimiter"]
