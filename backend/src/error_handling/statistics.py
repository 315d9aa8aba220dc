"""Per-fingerprint error statistics."""
import logging
import threading
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .persistence import StatisticsPersistence

logger = logging.getLogger(__name__)


@dataclass
class ErrorPatternStats:
    """Occurrence count and last occurrence of one fingerprint."""
    count: int
    last_seen: datetime

    def to_dict(self) -> dict:
        return {"count": self.count, "last_seen": self.last_seen.isoformat()}


class ErrorStatistics:
    """Tracks how often each error fingerprint occurs.

    All mutation happens under a lock so concurrent handlers cannot
    interleave updates of the same entry.
    """

    def __init__(self):
        self._patterns: dict[str, ErrorPatternStats] = {}
        self._lock = threading.Lock()

    def record_error(self, fingerprint: str, seen_at: datetime | None = None) -> ErrorPatternStats:
        """Increment the count for a fingerprint, creating it if absent."""
        seen_at = seen_at or datetime.now(UTC)
        with self._lock:
            stats = self._patterns.get(fingerprint)
            if stats is None:
                stats = ErrorPatternStats(count=1, last_seen=seen_at)
                self._patterns[fingerprint] = stats
            else:
                stats.count += 1
                stats.last_seen = seen_at
            return ErrorPatternStats(stats.count, stats.last_seen)

    def snapshot(self) -> dict[str, ErrorPatternStats]:
        """Copy of the current statistics."""
        with self._lock:
            return {
                fingerprint: ErrorPatternStats(stats.count, stats.last_seen)
                for fingerprint, stats in self._patterns.items()
            }

    def clear(self) -> None:
        with self._lock:
            self._patterns.clear()

    def merge(self, patterns: dict[str, ErrorPatternStats]) -> None:
        """Add counts from another snapshot, keeping the latest timestamps."""
        with self._lock:
            for fingerprint, incoming in patterns.items():
                current = self._patterns.get(fingerprint)
                if current is None:
                    self._patterns[fingerprint] = ErrorPatternStats(incoming.count, incoming.last_seen)
                else:
                    current.count += incoming.count
                    current.last_seen = max(current.last_seen, incoming.last_seen)

    def __len__(self) -> int:
        with self._lock:
            return len(self._patterns)

    async def save_to(self, persistence: 'StatisticsPersistence') -> int:
        """Write the current snapshot to a persistence backend."""
        snapshot = self.snapshot()
        await persistence.save(snapshot)
        logger.debug(f"Persisted {len(snapshot)} error patterns")
        return len(snapshot)

    async def load_from(self, persistence: 'StatisticsPersistence') -> int:
        """Merge previously persisted statistics into this tracker."""
        stored = await persistence.load()
        self.merge(stored)
        logger.debug(f"Loaded {len(stored)} error patterns")
        return len(stored)
