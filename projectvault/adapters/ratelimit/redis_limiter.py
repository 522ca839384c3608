"""
Redis rate limiter - Implements RateLimiter protocol across processes.

The same fixed-window algorithm as the in-process limiter, evaluated in
a Lua script so the read-check-increment is atomic on the Redis server.
Window expiry is Redis key expiry.
"""

import math
from datetime import timedelta

import redis

from projectvault.domain.exceptions import StorageError

# KEYS[1] = counter key, ARGV[1] = max attempts, ARGV[2] = window in ms.
# Returns 1 if allowed, 0 if denied. Denials leave the counter untouched.
_ALLOW_SCRIPT = """
local current = redis.call('GET', KEYS[1])
if not current then
    redis.call('SET', KEYS[1], 1, 'PX', ARGV[2])
    return 1
end
if tonumber(current) >= tonumber(ARGV[1]) then
    return 0
end
redis.call('INCR', KEYS[1])
return 1
"""


class RedisRateLimiter:
    """Implements RateLimiter protocol via redis-py."""

    def __init__(self, client: redis.Redis, prefix: str = "ratelimit:") -> None:
        self._client = client
        self._prefix = prefix
        self._allow = client.register_script(_ALLOW_SCRIPT)

    @classmethod
    def from_url(cls, url: str) -> "RedisRateLimiter":
        return cls(redis.Redis.from_url(url))

    def allow(self, key: str, max_attempts: int, window: timedelta) -> bool:
        window_ms = max(1, int(window.total_seconds() * 1000))
        try:
            result = self._allow(keys=[self._prefix + key], args=[max_attempts, window_ms])
        except redis.RedisError as e:
            raise StorageError("Rate limiter unavailable") from e
        return int(result) == 1

    def retry_after(self, key: str) -> int:
        try:
            ttl_ms = self._client.pttl(self._prefix + key)
        except redis.RedisError as e:
            raise StorageError("Rate limiter unavailable") from e
        # Missing key (-2) or no expiry (-1) means the window just lapsed
        if ttl_ms is None or ttl_ms < 0:
            return 1
        return max(1, math.ceil(ttl_ms / 1000))
