"""Per-client request rate limiting for the coaching service.

Each client key gets a per-minute and a per-hour aiolimiter bucket. The limiter
is constructed by the caller and injected into the service, so two services
never share hidden state.
"""

import time
from dataclasses import dataclass, field
from typing import Callable

import structlog
from aiolimiter import AsyncLimiter

from strengths_coach.models.coaching import ServiceError

logger = structlog.get_logger(__name__)


class RateLimitExceeded(ServiceError):
    """Raised when a client has exhausted its minute or hour budget."""

    def __init__(self, message: str, window: str):
        super().__init__(message, "RATE_LIMIT", details={"window": window})
        self.window = window


@dataclass
class _ClientBuckets:
    minute: AsyncLimiter
    hour: AsyncLimiter
    last_seen: float = field(default=0.0)


class RequestRateLimiter:
    """Non-blocking per-client rate limiter with idle-key eviction.

    Unlike a plain AsyncLimiter, acquire() never waits: a request that would
    exceed either window is rejected with RateLimitExceeded.
    """

    def __init__(
        self,
        requests_per_minute: int = 50,
        requests_per_hour: int = 1000,
        idle_ttl: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the rate limiter.

        Args:
            requests_per_minute: Maximum requests per client per 60 seconds
            requests_per_hour: Maximum requests per client per 3600 seconds
            idle_ttl: Seconds without requests after which a client's buckets are dropped
            clock: Monotonic time source used for eviction bookkeeping
        """
        self.requests_per_minute = requests_per_minute
        self.requests_per_hour = requests_per_hour
        self.idle_ttl = idle_ttl
        self._clock = clock
        self._clients: dict[str, _ClientBuckets] = {}

    @classmethod
    def from_config(cls, rate_limits) -> "RequestRateLimiter":
        """Build a limiter from a RateLimits config model."""
        return cls(
            requests_per_minute=rate_limits.requests_per_minute,
            requests_per_hour=rate_limits.requests_per_hour,
            idle_ttl=rate_limits.idle_ttl_seconds,
        )

    @property
    def tracked_clients(self) -> int:
        """Number of client keys currently holding buckets."""
        return len(self._clients)

    async def acquire(self, key: str = "default") -> None:
        """Consume one request from the client's minute and hour budgets.

        Args:
            key: Client/session identifier

        Raises:
            RateLimitExceeded: If either window has no remaining capacity
        """
        now = self._clock()
        self.evict_idle(now)

        buckets = self._clients.get(key)
        if buckets is None:
            buckets = _ClientBuckets(
                minute=AsyncLimiter(max_rate=self.requests_per_minute, time_period=60),
                hour=AsyncLimiter(max_rate=self.requests_per_hour, time_period=3600),
            )
            self._clients[key] = buckets

        buckets.last_seen = now

        if not buckets.minute.has_capacity():
            logger.warning("Rate limit exceeded", client_key=key, window="minute")
            raise RateLimitExceeded(
                "Rate limit exceeded: too many requests per minute", window="minute"
            )
        if not buckets.hour.has_capacity():
            logger.warning("Rate limit exceeded", client_key=key, window="hour")
            raise RateLimitExceeded(
                "Rate limit exceeded: too many requests per hour", window="hour"
            )

        await buckets.minute.acquire()
        await buckets.hour.acquire()

    def evict_idle(self, now: float | None = None) -> int:
        """Drop buckets for clients idle longer than idle_ttl.

        Returns:
            Number of evicted client keys
        """
        if now is None:
            now = self._clock()

        stale = [
            key
            for key, buckets in self._clients.items()
            if now - buckets.last_seen > self.idle_ttl
        ]
        for key in stale:
            del self._clients[key]

        if stale:
            logger.debug("Evicted idle rate limit buckets", evicted=len(stale))
        return len(stale)
