"""
Installation Counter

Tracks how many repositories the app has been installed on since startup.
"""

import logging
import threading


logger = logging.getLogger(__name__)


class InstallationCounter:
    """Monotonic, thread-safe count of repository installations."""

    def __init__(self):
        self._lock = threading.Lock()
        self._total = 0

    def record(self, repository_count: int) -> None:
        """Add newly installed repositories (used as the webhook installation recorder)"""
        if repository_count < 0:
            raise ValueError("Repository count must be non-negative")

        with self._lock:
            self._total += repository_count
            total = self._total

        logger.info(f"Recorded {repository_count} new installations ({total} since startup)")

    @property
    def total(self) -> int:
        with self._lock:
            return self._total
