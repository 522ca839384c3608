"""System clock adapter - Implements Clock protocol."""

from datetime import datetime, timezone


class SystemClock:
    """Implements Clock protocol with the wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)
