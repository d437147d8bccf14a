"""
Tests for in-memory rate limiter middleware.

Tests: RateLimiter class — sliding window, reset, independent keys.
"""
import os, sys
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

import pytest
from middleware.rate_limit import RateLimiter


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestRateLimiter:
    """Tests for the RateLimiter class."""

    @pytest.mark.unit
    def test_allows_requests_under_limit(self):
        """Requests under the limit should be allowed."""
        limiter = RateLimiter()
        for _ in range(5):
            assert limiter.check("testkey", max_requests=5, window_seconds=60) is True

    @pytest.mark.unit
    def test_blocks_requests_over_limit(self):
        """Request exceeding the limit should be blocked."""
        limiter = RateLimiter()
        for _ in range(3):
            limiter.check("testkey", max_requests=3, window_seconds=60)
        assert limiter.check("testkey", max_requests=3, window_seconds=60) is False

    @pytest.mark.unit
    def test_different_keys_independent(self):
        """Different keys should have independent limits."""
        limiter = RateLimiter()
        for _ in range(3):
            limiter.check("key1", max_requests=3, window_seconds=60)
        assert limiter.check("key1", max_requests=3, window_seconds=60) is False
        assert limiter.check("key2", max_requests=3, window_seconds=60) is True

    @pytest.mark.unit
    def test_window_slides(self):
        """Old attempts stop counting once they leave the window."""
        clock = FakeClock()
        limiter = RateLimiter(clock=clock)
        for _ in range(2):
            limiter.check("k", max_requests=2, window_seconds=60)
        assert limiter.check("k", max_requests=2, window_seconds=60) is False

        clock.now += 61
        assert limiter.check("k", max_requests=2, window_seconds=60) is True

    @pytest.mark.unit
    def test_remaining(self):
        limiter = RateLimiter()
        limiter.check("k", max_requests=3, window_seconds=60)
        assert limiter.remaining("k", max_requests=3, window_seconds=60) == 2

    @pytest.mark.unit
    def test_reset_single_key(self):
        limiter = RateLimiter()
        limiter.check("a", max_requests=1, window_seconds=60)
        limiter.check("b", max_requests=1, window_seconds=60)
        limiter.reset("a")
        assert limiter.check("a", max_requests=1, window_seconds=60) is True
        assert limiter.check("b", max_requests=1, window_seconds=60) is False

    @pytest.mark.unit
    def test_reset_all(self):
        limiter = RateLimiter()
        limiter.check("a", max_requests=1, window_seconds=60)
        limiter.reset()
        assert limiter.check("a", max_requests=1, window_seconds=60) is True

    @pytest.mark.unit
    def test_expired_keys_are_forgotten(self):
        """A key whose attempts all left the window is no longer stored."""
        clock = FakeClock()
        limiter = RateLimiter(clock=clock)
        for ip in ("10.0.0.1", "10.0.0.2", "10.0.0.3"):
            limiter.check(ip, max_requests=5, window_seconds=60)
        assert len(limiter) == 3

        clock.now += 61
        assert limiter.remaining("10.0.0.1", max_requests=5, window_seconds=60) == 5
        assert limiter.check("10.0.0.2", max_requests=5, window_seconds=60) is True
        # .1 expired and was dropped; .2 was dropped then re-recorded; .3 not touched yet
        assert len(limiter) == 2

    @pytest.mark.unit
    def test_lookups_do_not_create_keys(self):
        limiter = RateLimiter()
        assert limiter.remaining("never-seen", max_requests=3, window_seconds=60) == 3
        assert len(limiter) == 0
