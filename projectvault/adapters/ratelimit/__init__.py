"""Rate limiter adapters - In-process and Redis implementations."""

from .memory import InMemoryRateLimiter
from .redis_limiter import RedisRateLimiter

__all__ = ["InMemoryRateLimiter", "RedisRateLimiter"]
