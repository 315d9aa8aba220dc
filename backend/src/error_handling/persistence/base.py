"""
Base implementation for error statistics persistence.
"""
import logging
from abc import ABC, abstractmethod
from datetime import UTC, datetime, timedelta

from ..statistics import ErrorPatternStats


logger = logging.getLogger(__name__)


class StatisticsPersistence(ABC):
    """Base class for statistics persistence implementations."""

    def __init__(self):
        self._initialized = False

    async def initialize(self) -> None:
        """Initialize the persistence backend."""
        if not self._initialized:
            await self._setup()
            self._initialized = True

    @abstractmethod
    async def _setup(self) -> None:
        """Setup the persistence backend. Override in subclasses."""
        pass

    @abstractmethod
    async def save(self, patterns: dict[str, ErrorPatternStats]) -> None:
        """Replace stored statistics with ``patterns``."""
        pass

    @abstractmethod
    async def load(self) -> dict[str, ErrorPatternStats]:
        """Load all stored statistics."""
        pass

    @abstractmethod
    async def delete(self, fingerprint: str) -> None:
        """Delete statistics for one fingerprint."""
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Delete all stored statistics."""
        pass

    async def cleanup_old(self, days: int = 7) -> int:
        """
        Remove fingerprints not seen recently.

        Args:
            days: Number of days to keep data

        Returns:
            Number of fingerprints deleted
        """
        cutoff = datetime.now(UTC) - timedelta(days=days)

        deleted_count = 0
        for fingerprint, stats in (await self.load()).items():
            if stats.last_seen < cutoff:
                await self.delete(fingerprint)
                deleted_count += 1

        logger.info(f"Cleaned up {deleted_count} old error patterns")
        return deleted_count
