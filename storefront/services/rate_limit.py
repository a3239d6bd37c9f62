"""
Fixed-window rate limiting.

A limiter counts hits per identifier (client IP, normalized email) in a window
that starts at the first hit and expires after window_seconds. Counters live in
a CounterStore: Redis when REDIS_URL is configured, otherwise process memory.
Both stores increment and set the expiry atomically, so concurrent requests
cannot leave a counter without a TTL.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass

import redis

from storefront.core.config import Settings

logger = logging.getLogger(__name__)

REASON_IP_BLOCKED = "IP_BLOCKED"
REASON_EMAIL_BLOCKED = "EMAIL_BLOCKED"

# INCR, set the expiry on the first hit, return (count, ttl). A key left
# without a TTL (e.g. by an interrupted older client) gets one re-applied.
_INCR_EXPIRE_LUA = """
local count = redis.call('INCR', KEYS[1])
if count == 1 then
  redis.call('EXPIRE', KEYS[1], ARGV[1])
end
local ttl = redis.call('TTL', KEYS[1])
if ttl < 0 then
  redis.call('EXPIRE', KEYS[1], ARGV[1])
  ttl = tonumber(ARGV[1])
end
return {count, ttl}
"""


class CounterStore(ABC):
    """Atomic increment-and-expire counters keyed by string."""

    @abstractmethod
    def increment(self, key: str, window_seconds: int) -> tuple[int, int]:
        """Increment key, starting the expiry on the first hit. Returns (count, ttl seconds)."""

    @abstractmethod
    def reset(self, key: str) -> None:
        """Drop the counter for key."""

    def close(self) -> None:
        """Release any connections held by the store."""


class MemoryCounterStore(CounterStore):
    """
    In-process counters for development, tests and single-worker deployments.
    Not shared between processes.
    Expired windows are dropped by a sweep that runs at most once per
    sweep_interval seconds.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sweep_interval: float = 60.0,
    ) -> None:
        self._clock = clock
        self._sweep_interval = sweep_interval
        self._next_sweep = 0.0
        self._lock = threading.Lock()
        # key -> (count, expires_at on the store clock)
        self._counters: dict[str, tuple[int, float]] = {}

    def increment(self, key: str, window_seconds: int) -> tuple[int, int]:
        with self._lock:
            now = self._clock()
            if now >= self._next_sweep:
                self._sweep(now)
            count, expires_at = self._counters.get(key, (0, 0.0))
            if count == 0 or expires_at <= now:
                count, expires_at = 0, now + window_seconds
            count += 1
            self._counters[key] = (count, expires_at)
            ttl = max(1, int(round(expires_at - now)))
            return count, ttl

    def reset(self, key: str) -> None:
        with self._lock:
            self._counters.pop(key, None)

    def _sweep(self, now: float) -> None:
        expired = [k for k, (_, expires_at) in self._counters.items() if expires_at <= now]
        for key in expired:
            del self._counters[key]
        self._next_sweep = now + self._sweep_interval


class RedisCounterStore(CounterStore):
    """Counters in Redis; INCR and EXPIRE run in one Lua script."""

    def __init__(self, client: redis.Redis) -> None:
        self._client = client
        self._incr_expire = client.register_script(_INCR_EXPIRE_LUA)

    @classmethod
    def from_url(cls, url: str) -> "RedisCounterStore":
        return cls(redis.Redis.from_url(url, decode_responses=True))

    def increment(self, key: str, window_seconds: int) -> tuple[int, int]:
        count, ttl = self._incr_expire(keys=[key], args=[window_seconds])
        return int(count), int(ttl)

    def reset(self, key: str) -> None:
        self._client.delete(key)

    def close(self) -> None:
        self._client.close()


@dataclass(frozen=True)
class WindowPolicy:
    """Cap of `limit` hits per `window_seconds`, keyed under `key_prefix`."""

    key_prefix: str
    limit: int
    window_seconds: int
    reason: str


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    remaining: int
    # Epoch milliseconds at which the current window ends.
    reset_time: int
    reason: str | None = None


class FixedWindowLimiter:
    """Applies one WindowPolicy against a CounterStore."""

    def __init__(
        self,
        store: CounterStore,
        policy: WindowPolicy,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.policy = policy
        self._clock = clock

    def _key(self, identifier: str) -> str:
        return f"{self.policy.key_prefix}:{identifier}"

    def hit(self, identifier: str) -> RateLimitResult:
        """Count one attempt for identifier and report whether it is within the cap."""
        count, ttl = self.store.increment(self._key(identifier), self.policy.window_seconds)
        reset_time = int((self._clock() + ttl) * 1000)
        if count > self.policy.limit:
            logger.warning(
                "Rate limit exceeded",
                extra={
                    "limiter": self.policy.key_prefix,
                    "reason": self.policy.reason,
                    "count": count,
                },
            )
            return RateLimitResult(
                allowed=False,
                remaining=0,
                reset_time=reset_time,
                reason=self.policy.reason,
            )
        return RateLimitResult(
            allowed=True,
            remaining=self.policy.limit - count,
            reset_time=reset_time,
        )

    def reset(self, identifier: str) -> None:
        self.store.reset(self._key(identifier))


def build_counter_store(settings: Settings) -> CounterStore:
    """Redis-backed store when REDIS_URL is set, otherwise in-process."""
    if settings.REDIS_URL:
        logger.info("Rate-limit counters stored in Redis")
        return RedisCounterStore.from_url(settings.REDIS_URL)
    if settings.APP_ENV == "prod":
        logger.warning(
            "REDIS_URL not set; rate-limit counters are per-process and reset on restart"
        )
    return MemoryCounterStore()


def register_ip_limiter(store: CounterStore, settings: Settings) -> FixedWindowLimiter:
    return FixedWindowLimiter(
        store,
        WindowPolicy(
            "register_ip",
            settings.REGISTER_IP_ATTEMPTS,
            settings.REGISTER_IP_WINDOW_SEC,
            REASON_IP_BLOCKED,
        ),
    )


def register_email_limiter(store: CounterStore, settings: Settings) -> FixedWindowLimiter:
    return FixedWindowLimiter(
        store,
        WindowPolicy(
            "register_email",
            settings.REGISTER_EMAIL_ATTEMPTS,
            settings.REGISTER_EMAIL_WINDOW_SEC,
            REASON_EMAIL_BLOCKED,
        ),
    )


def login_ip_limiter(store: CounterStore, settings: Settings) -> FixedWindowLimiter:
    return FixedWindowLimiter(
        store,
        WindowPolicy(
            "login_ip",
            settings.LOGIN_IP_ATTEMPTS,
            settings.LOGIN_IP_WINDOW_SEC,
            REASON_IP_BLOCKED,
        ),
    )


def login_email_limiter(store: CounterStore, settings: Settings) -> FixedWindowLimiter:
    return FixedWindowLimiter(
        store,
        WindowPolicy(
            "login_email",
            settings.LOGIN_EMAIL_ATTEMPTS,
            settings.LOGIN_EMAIL_WINDOW_SEC,
            REASON_EMAIL_BLOCKED,
        ),
    )
