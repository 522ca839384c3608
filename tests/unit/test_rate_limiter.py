"""
Unit tests for the rate limiter adapters.

Tests verify the fixed-window algorithm of InMemoryRateLimiter and the
Redis limiter's use of its client with a mocked redis connection.
"""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest
import redis

from projectvault.adapters.ratelimit import InMemoryRateLimiter, RedisRateLimiter
from projectvault.domain.exceptions import StorageError

WINDOW = timedelta(minutes=15)


class TestFixedWindow:
    """Tests for the in-process fixed-window counter."""

    def test_first_request_allowed(self, rate_limiter: InMemoryRateLimiter) -> None:
        assert rate_limiter.allow("passcode:a", 5, WINDOW) is True

    def test_sixth_request_in_window_denied(self, rate_limiter: InMemoryRateLimiter) -> None:
        results = [rate_limiter.allow("passcode:a", 5, WINDOW) for _ in range(6)]
        assert results == [True, True, True, True, True, False]

    def test_denied_requests_do_not_extend_window(self, rate_limiter, clock) -> None:
        """Denials do not mutate state; the window still resets on time."""
        for _ in range(5):
            rate_limiter.allow("passcode:a", 5, WINDOW)
        clock.advance(minutes=10)
        for _ in range(10):
            assert rate_limiter.allow("passcode:a", 5, WINDOW) is False

        clock.advance(minutes=5, seconds=1)
        assert rate_limiter.allow("passcode:a", 5, WINDOW) is True

    def test_window_reset_restores_full_quota(self, rate_limiter, clock) -> None:
        for _ in range(5):
            rate_limiter.allow("passcode:a", 5, WINDOW)
        clock.advance(minutes=16)

        results = [rate_limiter.allow("passcode:a", 5, WINDOW) for _ in range(6)]
        assert results == [True, True, True, True, True, False]

    def test_window_boundary_is_exclusive(self, rate_limiter, clock) -> None:
        """At exactly the reset time the old window still applies."""
        for _ in range(5):
            rate_limiter.allow("passcode:a", 5, WINDOW)
        clock.advance(minutes=15)
        assert rate_limiter.allow("passcode:a", 5, WINDOW) is False
        clock.advance(seconds=1)
        assert rate_limiter.allow("passcode:a", 5, WINDOW) is True

    def test_keys_are_independent(self, rate_limiter: InMemoryRateLimiter) -> None:
        for _ in range(5):
            rate_limiter.allow("passcode:a", 5, WINDOW)
        assert rate_limiter.allow("passcode:a", 5, WINDOW) is False
        assert rate_limiter.allow("passcode:b", 5, WINDOW) is True

    def test_retry_after_counts_down(self, rate_limiter, clock) -> None:
        for _ in range(6):
            rate_limiter.allow("passcode:a", 5, WINDOW)
        assert rate_limiter.retry_after("passcode:a") == 900
        clock.advance(minutes=14, seconds=30)
        assert rate_limiter.retry_after("passcode:a") == 30

    def test_retry_after_unknown_key_is_at_least_one(self, rate_limiter: InMemoryRateLimiter) -> None:
        assert rate_limiter.retry_after("passcode:nobody") == 1

    def test_retry_after_never_zero_at_window_end(self, rate_limiter, clock) -> None:
        for _ in range(6):
            rate_limiter.allow("passcode:a", 5, WINDOW)
        clock.advance(minutes=15)
        assert rate_limiter.retry_after("passcode:a") == 1

    def test_reset_clears_all_windows(self, rate_limiter: InMemoryRateLimiter) -> None:
        for _ in range(5):
            rate_limiter.allow("passcode:a", 5, WINDOW)
        rate_limiter.reset()
        assert rate_limiter.allow("passcode:a", 5, WINDOW) is True


class TestRedisRateLimiter:
    """Tests for RedisRateLimiter with a mocked client."""

    @pytest.fixture
    def client(self) -> MagicMock:
        client = MagicMock(spec=redis.Redis)
        client.register_script.return_value = MagicMock(return_value=1)
        return client

    def test_registers_script_once(self, client: MagicMock) -> None:
        RedisRateLimiter(client)
        client.register_script.assert_called_once()

    def test_allow_passes_prefixed_key_and_window_ms(self, client: MagicMock) -> None:
        limiter = RedisRateLimiter(client)
        assert limiter.allow("passcode:a", 5, WINDOW) is True

        script = client.register_script.return_value
        script.assert_called_once_with(keys=["ratelimit:passcode:a"], args=[5, 900_000])

    def test_allow_denied_when_script_returns_zero(self, client: MagicMock) -> None:
        client.register_script.return_value.return_value = 0
        limiter = RedisRateLimiter(client)
        assert limiter.allow("passcode:a", 5, WINDOW) is False

    def test_retry_after_rounds_ttl_up(self, client: MagicMock) -> None:
        client.pttl.return_value = 12_001
        limiter = RedisRateLimiter(client)
        assert limiter.retry_after("passcode:a") == 13
        client.pttl.assert_called_once_with("ratelimit:passcode:a")

    def test_retry_after_missing_key_is_at_least_one(self, client: MagicMock) -> None:
        client.pttl.return_value = -2
        limiter = RedisRateLimiter(client)
        assert limiter.retry_after("passcode:a") == 1

    def test_retry_after_sub_second_ttl_rounds_to_one(self, client: MagicMock) -> None:
        client.pttl.return_value = 1
        limiter = RedisRateLimiter(client)
        assert limiter.retry_after("passcode:a") == 1

    def test_redis_errors_become_storage_errors(self, client: MagicMock) -> None:
        client.register_script.return_value.side_effect = redis.ConnectionError("down")
        limiter = RedisRateLimiter(client)
        with pytest.raises(StorageError):
            limiter.allow("passcode:a", 5, WINDOW)
