"""Unit tests for fixed-window counters and limiters (memory and Redis stores)."""

import unittest
from unittest.mock import MagicMock, patch

from storefront.services.rate_limit import (
    REASON_EMAIL_BLOCKED,
    REASON_IP_BLOCKED,
    FixedWindowLimiter,
    MemoryCounterStore,
    RedisCounterStore,
    WindowPolicy,
    build_counter_store,
    register_email_limiter,
    register_ip_limiter,
)
from support import make_settings


class FakeClock:
    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestMemoryCounterStore(unittest.TestCase):
    """Window starts at the first hit and expires after window_seconds."""

    def test_counts_within_window(self) -> None:
        clock = FakeClock()
        store = MemoryCounterStore(clock=clock)
        self.assertEqual(store.increment("k", 60), (1, 60))
        clock.now += 10
        self.assertEqual(store.increment("k", 60), (2, 50))

    def test_window_expires(self) -> None:
        clock = FakeClock()
        store = MemoryCounterStore(clock=clock)
        store.increment("k", 60)
        store.increment("k", 60)
        clock.now += 61
        self.assertEqual(store.increment("k", 60), (1, 60))

    def test_reset_drops_counter(self) -> None:
        store = MemoryCounterStore(clock=FakeClock())
        store.increment("k", 60)
        store.reset("k")
        self.assertEqual(store.increment("k", 60)[0], 1)

    def test_keys_are_independent(self) -> None:
        store = MemoryCounterStore(clock=FakeClock())
        store.increment("a", 60)
        self.assertEqual(store.increment("b", 60)[0], 1)

    def test_expired_keys_are_swept(self) -> None:
        clock = FakeClock(now=0.0)
        store = MemoryCounterStore(clock=clock)
        for i in range(1000):
            store.increment(f"ip:{i}", 60)
        self.assertEqual(len(store._counters), 1000)
        clock.now = 10_000.0
        store.increment("ip:new", 60)
        self.assertEqual(list(store._counters), ["ip:new"])

    def test_live_keys_survive_sweep(self) -> None:
        clock = FakeClock(now=0.0)
        store = MemoryCounterStore(clock=clock, sweep_interval=10)
        store.increment("short", 5)
        store.increment("long", 3600)
        clock.now = 20.0
        store.increment("other", 60)
        self.assertEqual(sorted(store._counters), ["long", "other"])
        self.assertEqual(store.increment("long", 3600)[0], 2)


class TestFixedWindowLimiter(unittest.TestCase):
    def _limiter(self, limit: int = 2) -> FixedWindowLimiter:
        store = MemoryCounterStore(clock=FakeClock())
        policy = WindowPolicy("test", limit, 3600, REASON_IP_BLOCKED)
        return FixedWindowLimiter(store, policy, clock=lambda: 1_700_000_000.0)

    def test_allows_up_to_limit_then_blocks(self) -> None:
        limiter = self._limiter(limit=2)
        first = limiter.hit("10.0.0.1")
        second = limiter.hit("10.0.0.1")
        third = limiter.hit("10.0.0.1")
        self.assertTrue(first.allowed)
        self.assertEqual(first.remaining, 1)
        self.assertTrue(second.allowed)
        self.assertEqual(second.remaining, 0)
        self.assertFalse(third.allowed)
        self.assertEqual(third.reason, REASON_IP_BLOCKED)

    def test_reset_time_is_epoch_ms(self) -> None:
        result = self._limiter().hit("10.0.0.1")
        self.assertEqual(result.reset_time, (1_700_000_000 + 3600) * 1000)

    def test_reset_clears_identifier(self) -> None:
        limiter = self._limiter(limit=1)
        limiter.hit("x")
        limiter.reset("x")
        self.assertTrue(limiter.hit("x").allowed)


class TestPolicyBuilders(unittest.TestCase):
    def test_register_limits_from_settings(self) -> None:
        settings = make_settings()
        store = MemoryCounterStore()
        ip = register_ip_limiter(store, settings)
        email = register_email_limiter(store, settings)
        self.assertEqual((ip.policy.limit, ip.policy.window_seconds), (5, 3600))
        self.assertEqual((email.policy.limit, email.policy.window_seconds), (1, 86400))
        self.assertEqual(email.policy.reason, REASON_EMAIL_BLOCKED)
        self.assertNotEqual(ip.policy.key_prefix, email.policy.key_prefix)


class TestRedisCounterStore(unittest.TestCase):
    """The Lua script is registered once and called with the key and window."""

    def test_increment_runs_script(self) -> None:
        client = MagicMock()
        script = MagicMock(return_value=[3, 1200])
        client.register_script.return_value = script
        store = RedisCounterStore(client)
        self.assertEqual(store.increment("register_ip:1.2.3.4", 3600), (3, 1200))
        script.assert_called_once_with(keys=["register_ip:1.2.3.4"], args=[3600])

    def test_reset_deletes_key(self) -> None:
        client = MagicMock()
        store = RedisCounterStore(client)
        store.reset("login_email:a@b.com")
        client.delete.assert_called_once_with("login_email:a@b.com")

    def test_close_closes_client(self) -> None:
        client = MagicMock()
        RedisCounterStore(client).close()
        client.close.assert_called_once()


class TestBuildCounterStore(unittest.TestCase):
    def test_memory_store_without_redis_url(self) -> None:
        self.assertIsInstance(build_counter_store(make_settings()), MemoryCounterStore)

    def test_redis_store_with_redis_url(self) -> None:
        settings = make_settings(REDIS_URL="redis://localhost:6379/0")
        with patch("storefront.services.rate_limit.redis.Redis.from_url") as from_url:
            store = build_counter_store(settings)
        self.assertIsInstance(store, RedisCounterStore)
        from_url.assert_called_once_with("redis://localhost:6379/0", decode_responses=True)


if __name__ == "__main__":
    unittest.main()
