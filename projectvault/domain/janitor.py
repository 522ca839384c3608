"""
Passcode janitor - Periodic purge of consumed and expired passcodes.

The janitor runs on its own daemon thread and shares nothing with the
request path except the passcode repository. It is started and stopped
by the application lifespan.
"""

import logging
import threading

from .ports import PasscodeRepository

logger = logging.getLogger(__name__)


class PasscodeJanitor:
    """Runs purge_expired_or_consumed() every interval_seconds until stopped."""

    def __init__(self, repository: PasscodeRepository, interval_seconds: float = 300.0) -> None:
        self._repository = repository
        self._interval = interval_seconds
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_once(self) -> int:
        """
        Purge once.

        Returns:
            Number of rows removed, or 0 if the purge failed
        """
        try:
            removed = self._repository.purge_expired_or_consumed()
        except Exception:
            logger.exception("Passcode purge failed")
            return 0
        if removed:
            logger.info("Purged %d used or expired passcode(s)", removed)
        else:
            logger.debug("Passcode purge found nothing to remove")
        return removed

    def start(self) -> None:
        """Start the background thread. No-op if already running."""
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, name="passcode-janitor", daemon=True
        )
        self._thread.start()
        logger.info("Passcode janitor started (interval=%ss)", self._interval)

    def stop(self, timeout: float | None = 5.0) -> None:
        """Signal the thread to exit and wait for it."""
        thread = self._thread
        if thread is None:
            return
        self._stop.set()
        thread.join(timeout)
        self._thread = None
        logger.info("Passcode janitor stopped")

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            self.run_once()
