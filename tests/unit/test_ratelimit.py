"""Tests for the token bucket rate limiter."""

import asyncio

import pytest

from grout.ratelimit import AllowAllLimiter, RateLimiter, TokenBucket, create_rate_limiter


class TestTokenBucket:
    """Test a single bucket."""

    def test_refills_continuously(self):
        bucket = TokenBucket(rate=1.0, burst=2, tokens=0.0, last_refill=0.0)

        assert bucket.allow(0.5) is False
        assert bucket.allow(1.0) is True

    def test_never_exceeds_burst(self):
        bucket = TokenBucket(rate=1.0, burst=2, tokens=2.0, last_refill=0.0)

        assert bucket.allow(1000.0) is True
        assert bucket.allow(1000.0) is True
        assert bucket.allow(1000.0) is False


class TestRateLimiter:
    """Test per-client admission."""

    def test_burst_then_refill(self, clock):
        limiter = RateLimiter(rpm=60, burst=1, clock=clock)

        assert limiter.admit("1.2.3.4") is True
        assert limiter.admit("1.2.3.4") is False

        clock.advance(1.0)

        assert limiter.admit("1.2.3.4") is True

    def test_clients_are_independent(self, clock):
        limiter = RateLimiter(rpm=60, burst=1, clock=clock)

        assert limiter.admit("a") is True
        assert limiter.admit("a") is False
        assert limiter.admit("b") is True

    def test_new_clients_start_with_full_burst(self, clock):
        limiter = RateLimiter(rpm=100, burst=10, clock=clock)

        results = [limiter.admit("client") for _ in range(11)]

        assert results == [True] * 10 + [False]

    def test_rate_is_per_second(self):
        assert RateLimiter(rpm=120).rate == 2.0

    def test_sweep_drops_idle_clients(self, clock):
        limiter = RateLimiter(rpm=60, burst=1, idle_timeout=600, clock=clock)
        limiter.admit("idle")
        clock.advance(300)
        limiter.admit("active")
        clock.advance(301)

        assert limiter.sweep() == 1
        assert "idle" not in limiter
        assert "active" in limiter

    def test_swept_client_starts_over(self, clock):
        limiter = RateLimiter(rpm=1, burst=1, idle_timeout=10, clock=clock)
        limiter.admit("c")
        assert limiter.admit("c") is False

        clock.advance(11)
        limiter.sweep()

        assert len(limiter) == 0
        assert limiter.admit("c") is True

    def test_rejects_invalid_configuration(self):
        with pytest.raises(ValueError):
            RateLimiter(rpm=0)

    @pytest.mark.asyncio
    async def test_background_sweep_runs_and_stops(self, clock):
        limiter = RateLimiter(rpm=60, burst=1, cleanup_interval=0.01, idle_timeout=5, clock=clock)
        limiter.admit("c")
        clock.advance(10)

        await limiter.startup()
        await asyncio.sleep(0.05)
        await limiter.shutdown()

        assert len(limiter) == 0

    @pytest.mark.asyncio
    async def test_shutdown_without_startup_is_noop(self):
        await RateLimiter().shutdown()


class TestFactory:
    """Test limiter factory."""

    def test_disabled_returns_allow_all(self):
        limiter = create_rate_limiter(False, 1, 1, 1.0, 1.0)

        assert isinstance(limiter, AllowAllLimiter)
        assert all(limiter.admit("x") for _ in range(100))

    def test_enabled_returns_rate_limiter(self):
        limiter = create_rate_limiter(True, 30, 5, 60.0, 60.0)

        assert isinstance(limiter, RateLimiter)
        assert limiter.burst == 5
