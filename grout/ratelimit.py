"""Per-client token bucket rate limiting with idle-entry eviction."""

import asyncio
import contextlib
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from loguru import logger

from .storage.protocols import Limiter

Clock = Callable[[], float]


@dataclass
class TokenBucket:
    """Holds up to ``burst`` tokens, refilled continuously at ``rate`` per second."""

    rate: float
    burst: int
    tokens: float
    last_refill: float

    def allow(self, now: float) -> bool:
        elapsed = max(0.0, now - self.last_refill)
        self.tokens = min(float(self.burst), self.tokens + elapsed * self.rate)
        self.last_refill = now
        if self.tokens >= 1.0:
            self.tokens -= 1.0
            return True
        return False


@dataclass
class LimiterEntry:
    bucket: TokenBucket
    last_access: float = field(default=0.0)


class RateLimiter:
    """Registry of token buckets keyed by client identity.

    Buckets are created on a client's first request. A background sweep,
    started by :meth:`startup` and stopped by :meth:`shutdown`, drops entries
    that have been idle longer than ``idle_timeout`` seconds regardless of how
    much of their budget they used, so a client that stays quiet long enough
    starts over with a full bucket.
    """

    def __init__(
        self,
        rpm: int = 100,
        burst: int = 10,
        cleanup_interval: float = 600.0,
        idle_timeout: float = 600.0,
        clock: Clock = time.monotonic,
    ) -> None:
        if rpm <= 0 or burst <= 0:
            raise ValueError("rpm and burst must be greater than zero")
        self.rpm = rpm
        self.burst = burst
        self.cleanup_interval = cleanup_interval
        self.idle_timeout = idle_timeout
        self._clock = clock
        self._entries: dict[str, LimiterEntry] = {}
        self._lock = threading.Lock()
        self._sweeper: asyncio.Task[None] | None = None

    @property
    def rate(self) -> float:
        """Tokens added per second."""
        return self.rpm / 60.0

    def admit(self, client_id: str) -> bool:
        """Consume one token for ``client_id``; False when none is available."""
        with self._lock:
            now = self._clock()
            entry = self._entries.get(client_id)
            if entry is None:
                bucket = TokenBucket(self.rate, self.burst, float(self.burst), now)
                entry = LimiterEntry(bucket)
                self._entries[client_id] = entry
            entry.last_access = now
            allowed = entry.bucket.allow(now)

        if not allowed:
            logger.debug(f"Rate limit exceeded for {client_id}")
        return allowed

    def sweep(self) -> int:
        """Remove idle clients. Returns how many entries were dropped."""
        with self._lock:
            now = self._clock()
            stale = [
                client_id
                for client_id, entry in self._entries.items()
                if now - entry.last_access > self.idle_timeout
            ]
            for client_id in stale:
                del self._entries[client_id]
        if stale:
            logger.debug(f"Dropped {len(stale)} idle rate limiter entries")
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, client_id: str) -> bool:
        with self._lock:
            return client_id in self._entries

    async def _sweep_forever(self) -> None:
        while True:
            await asyncio.sleep(self.cleanup_interval)
            self.sweep()

    async def startup(self) -> None:
        """Start the periodic sweep on the running event loop."""
        if self._sweeper is None:
            self._sweeper = asyncio.create_task(self._sweep_forever())
            logger.info(
                f"Rate limiter started ({self.rpm} req/min, burst {self.burst}, "
                f"sweep every {self.cleanup_interval:g}s)"
            )

    async def shutdown(self) -> None:
        """Cancel the sweep task and wait for it to finish."""
        if self._sweeper is None:
            return
        self._sweeper.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._sweeper
        self._sweeper = None
        logger.info("Rate limiter stopped")


class AllowAllLimiter:
    """Limiter used when rate limiting is disabled."""

    def admit(self, client_id: str) -> bool:
        return True

    async def startup(self) -> None:
        pass

    async def shutdown(self) -> None:
        pass


def create_rate_limiter(
    enabled: bool,
    rpm: int,
    burst: int,
    cleanup_interval: float,
    idle_timeout: float,
) -> Limiter:
    """Factory function to create the limiter based on configuration."""
    if not enabled:
        logger.info("Rate limiting disabled")
        return AllowAllLimiter()
    return RateLimiter(rpm, burst, cleanup_interval, idle_timeout)
