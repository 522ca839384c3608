"""
In-process rate limiter - Implements RateLimiter protocol.

Fixed-window counter keyed by identity. Windows can admit up to twice
the limit across a boundary; this guards against sustained abuse, not
exact quotas. State lives in this process only and is lost on restart.
"""

import math
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta

from projectvault.domain.ports import Clock


@dataclass
class _Window:
    count: int
    reset_at: datetime


class InMemoryRateLimiter:
    """
    Implements RateLimiter protocol with a dict guarded by one lock.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, clock: Clock) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._windows: dict[str, _Window] = {}

    def allow(self, key: str, max_attempts: int, window: timedelta) -> bool:
        now = self._clock.now()
        with self._lock:
            record = self._windows.get(key)
            if record is None or now > record.reset_at:
                self._windows[key] = _Window(count=1, reset_at=now + window)
                return True
            if record.count >= max_attempts:
                return False
            record.count += 1
            return True

    def retry_after(self, key: str) -> int:
        now = self._clock.now()
        with self._lock:
            record = self._windows.get(key)
            if record is None:
                return 1
            remaining = (record.reset_at - now).total_seconds()
        return max(1, math.ceil(remaining))

    def reset(self) -> None:
        """Forget every window."""
        with self._lock:
            self._windows.clear()
