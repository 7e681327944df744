"""Tests for the fixed-window rate limiter."""
import threading

import pytest

from stager.errors import RateLimited
from stager.services.rate_limiter import FixedWindowRateLimiter


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


def test_ceiling_plus_one_is_rejected():
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(limit=30, window=60, clock=clock)

    statuses = [limiter.hit("1.2.3.4") for _ in range(31)]

    assert all(s.allowed for s in statuses[:30])
    assert statuses[29].remaining == 0
    assert not statuses[30].allowed


def test_addresses_are_independent():
    limiter = FixedWindowRateLimiter(limit=1, window=60, clock=FakeClock())

    assert limiter.hit("a").allowed
    assert not limiter.hit("a").allowed
    assert limiter.hit("b").allowed


def test_first_request_after_window_is_allowed():
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(limit=2, window=60, clock=clock)
    for _ in range(5):
        limiter.hit("a")

    clock.now += 60
    status = limiter.hit("a")

    assert status.allowed
    assert status.remaining == 1
    assert status.reset_at == clock.now + 60


def test_check_raises_with_status():
    limiter = FixedWindowRateLimiter(limit=1, window=60, clock=FakeClock())
    limiter.check("a")

    with pytest.raises(RateLimited) as exc:
        limiter.check("a")

    assert exc.value.status_code == 429
    assert exc.value.status.remaining == 0


def test_sweep_drops_only_stale_counters():
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(limit=5, window=60, clock=clock)
    limiter.hit("old")
    clock.now += 100
    limiter.hit("fresh")

    clock.now += 20  # "old" window ended 60s+ ago, "fresh" is still live
    assert limiter.sweep() == 1
    assert len(limiter) == 1


def test_hit_sweeps_periodically():
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(limit=5, window=60, sweep_interval=300, clock=clock)
    limiter.hit("old")

    clock.now += 301
    limiter.hit("new")

    assert len(limiter) == 1


def test_headers():
    limiter = FixedWindowRateLimiter(limit=3, window=60, clock=FakeClock(1000.0))
    headers = limiter.hit("a").headers()

    assert headers == {
        "X-RateLimit-Limit": "3",
        "X-RateLimit-Remaining": "2",
        "X-RateLimit-Reset": "1060",
    }


def test_concurrent_hits_are_counted_exactly():
    limiter = FixedWindowRateLimiter(limit=1000, window=60, clock=FakeClock())

    def worker():
        for _ in range(100):
            limiter.hit("shared")

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert limiter.hit("shared").remaining == 1000 - 801


def test_reset_clears_counters():
    limiter = FixedWindowRateLimiter(limit=1, window=60, clock=FakeClock())
    limiter.hit("a")
    limiter.reset()

    assert len(limiter) == 0
    assert limiter.hit("a").allowed
