"""Fixed-window request limiter keyed by client address.

Counters live in process memory. ``hit``/``check``/``sweep``/``reset`` are the
whole interface, so a shared (e.g. Redis-backed) limiter can replace this one
without touching callers.
"""
import threading
import time
from dataclasses import dataclass

from stager.errors import RateLimited


@dataclass(frozen=True)
class RateLimitStatus:
    allowed: bool
    limit: int
    remaining: int
    reset_at: float

    def headers(self):
        return {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(int(self.reset_at)),
        }


@dataclass
class _Counter:
    count: int
    reset_at: float


class FixedWindowRateLimiter:
    def __init__(self, limit=30, window=60, sweep_interval=300, clock=time.time):
        self.limit = limit
        self.window = window
        self.sweep_interval = sweep_interval
        self._clock = clock
        self._counters = {}
        self._lock = threading.Lock()
        self._next_sweep = clock() + sweep_interval

    def hit(self, key):
        """Count one request for ``key`` and report whether it is allowed."""
        now = self._clock()
        with self._lock:
            if now >= self._next_sweep:
                self._sweep_locked(now)
                self._next_sweep = now + self.sweep_interval

            counter = self._counters.get(key)
            if counter is None or now >= counter.reset_at:
                counter = _Counter(count=1, reset_at=now + self.window)
                self._counters[key] = counter
            else:
                counter.count += 1

            allowed = counter.count <= self.limit
            return RateLimitStatus(
                allowed=allowed,
                limit=self.limit,
                remaining=max(self.limit - counter.count, 0),
                reset_at=counter.reset_at,
            )

    def check(self, key):
        """Like ``hit`` but raises RateLimited once the ceiling is passed."""
        status = self.hit(key)
        if not status.allowed:
            raise RateLimited(status)
        return status

    def sweep(self, now=None):
        """Drop counters whose window ended more than one window ago."""
        if now is None:
            now = self._clock()
        with self._lock:
            return self._sweep_locked(now)

    def _sweep_locked(self, now):
        stale = [
            key for key, counter in self._counters.items()
            if now >= counter.reset_at + self.window
        ]
        for key in stale:
            del self._counters[key]
        return len(stale)

    def reset(self):
        with self._lock:
            self._counters.clear()

    def __len__(self):
        with self._lock:
            return len(self._counters)
