"""In-memory implementation of statistics persistence."""
import asyncio

from ..statistics import ErrorPatternStats
from .base import StatisticsPersistence


class MemoryStatisticsPersistence(StatisticsPersistence):
    """In-memory implementation of statistics persistence.

    Useful for testing and scenarios where persistence across restarts
    is not required.
    """

    def __init__(self):
        super().__init__()
        self._storage: dict[str, ErrorPatternStats] = {}
        self._lock = asyncio.Lock()

    async def _setup(self) -> None:
        """No setup needed for memory persistence."""
        pass

    async def save(self, patterns: dict[str, ErrorPatternStats]) -> None:
        async with self._lock:
            self._storage = {
                fingerprint: ErrorPatternStats(stats.count, stats.last_seen)
                for fingerprint, stats in patterns.items()
            }

    async def load(self) -> dict[str, ErrorPatternStats]:
        async with self._lock:
            return {
                fingerprint: ErrorPatternStats(stats.count, stats.last_seen)
                for fingerprint, stats in self._storage.items()
            }

    async def delete(self, fingerprint: str) -> None:
        async with self._lock:
            self._storage.pop(fingerprint, None)

    async def clear(self) -> None:
        async with self._lock:
            self._storage.clear()
