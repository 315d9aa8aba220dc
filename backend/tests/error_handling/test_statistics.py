"""
Tests for error statistics and their persistence backends.
"""
import threading
from datetime import UTC, datetime, timedelta

import pytest
import pytest_asyncio

from backend.src.error_handling import ErrorPatternStats, ErrorStatistics
from backend.src.error_handling.persistence import (
    MemoryStatisticsPersistence,
    SQLAlchemyStatisticsPersistence,
)


class TestErrorStatistics:
    """Test cases for the in-process tracker."""

    def test_record_increments_count(self):
        stats = ErrorStatistics()

        stats.record_error("server:500")
        result = stats.record_error("server:500")

        assert result.count == 2
        assert stats.snapshot()["server:500"].count == 2

    def test_last_seen_updated(self):
        stats = ErrorStatistics()
        earlier = datetime(2024, 1, 1, tzinfo=UTC)
        later = datetime(2024, 1, 2, tzinfo=UTC)

        stats.record_error("network:none", seen_at=earlier)
        stats.record_error("network:none", seen_at=later)

        assert stats.snapshot()["network:none"].last_seen == later

    def test_clear(self):
        stats = ErrorStatistics()
        stats.record_error("server:500")
        stats.record_error("rate_limit:429")

        stats.clear()

        assert stats.snapshot() == {}
        assert len(stats) == 0

    def test_snapshot_is_a_copy(self):
        """Test that mutating a snapshot does not affect the tracker."""
        stats = ErrorStatistics()
        stats.record_error("server:500")

        snapshot = stats.snapshot()
        snapshot["server:500"].count = 99
        snapshot["other"] = ErrorPatternStats(1, datetime.now(UTC))

        assert stats.snapshot()["server:500"].count == 1
        assert "other" not in stats.snapshot()

    def test_merge(self):
        stats = ErrorStatistics()
        old = datetime(2024, 1, 1, tzinfo=UTC)
        new = datetime(2024, 6, 1, tzinfo=UTC)
        stats.record_error("server:500", seen_at=new)

        stats.merge({
            "server:500": ErrorPatternStats(3, old),
            "network:none": ErrorPatternStats(2, old),
        })

        snapshot = stats.snapshot()
        assert snapshot["server:500"].count == 4
        assert snapshot["server:500"].last_seen == new
        assert snapshot["network:none"].count == 2

    def test_concurrent_updates(self):
        stats = ErrorStatistics()

        def record():
            for _ in range(500):
                stats.record_error("server:500")

        threads = [threading.Thread(target=record) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert stats.snapshot()["server:500"].count == 4000

    def test_to_dict(self):
        seen = datetime(2024, 1, 1, tzinfo=UTC)
        assert ErrorPatternStats(2, seen).to_dict() == {
            "count": 2,
            "last_seen": "2024-01-01T00:00:00+00:00",
        }


@pytest_asyncio.fixture(params=["memory", "sqlalchemy"])
async def persistence(request, tmp_path):
    """Each persistence backend, initialized and closed around the test."""
    if request.param == "memory":
        backend = MemoryStatisticsPersistence()
    else:
        backend = SQLAlchemyStatisticsPersistence(
            f"sqlite+aiosqlite:///{tmp_path / 'statistics.db'}"
        )

    await backend.initialize()
    yield backend

    if isinstance(backend, SQLAlchemyStatisticsPersistence):
        await backend.close()


class TestStatisticsPersistence:
    """Behaviour shared by all persistence backends."""

    @pytest.mark.asyncio
    async def test_save_and_load(self, persistence):
        seen = datetime(2024, 3, 1, 12, 30, tzinfo=UTC)

        await persistence.save({"server:500": ErrorPatternStats(3, seen)})
        loaded = await persistence.load()

        assert loaded["server:500"].count == 3
        assert loaded["server:500"].last_seen == seen

    @pytest.mark.asyncio
    async def test_save_replaces_previous(self, persistence):
        now = datetime.now(UTC)

        await persistence.save({"a:1": ErrorPatternStats(1, now)})
        await persistence.save({"b:2": ErrorPatternStats(2, now)})

        assert set(await persistence.load()) == {"b:2"}

    @pytest.mark.asyncio
    async def test_delete_and_clear(self, persistence):
        now = datetime.now(UTC)
        await persistence.save({
            "a:1": ErrorPatternStats(1, now),
            "b:2": ErrorPatternStats(2, now),
        })

        await persistence.delete("a:1")
        assert set(await persistence.load()) == {"b:2"}

        await persistence.clear()
        assert await persistence.load() == {}

    @pytest.mark.asyncio
    async def test_cleanup_old(self, persistence):
        now = datetime.now(UTC)
        await persistence.save({
            "recent:1": ErrorPatternStats(1, now),
            "stale:2": ErrorPatternStats(5, now - timedelta(days=30)),
        })

        deleted = await persistence.cleanup_old(days=7)

        assert deleted == 1
        assert set(await persistence.load()) == {"recent:1"}

    @pytest.mark.asyncio
    async def test_tracker_round_trip(self, persistence):
        """Test that a tracker restores counts saved by another tracker."""
        source = ErrorStatistics()
        source.record_error("server:500")
        source.record_error("server:500")

        assert await source.save_to(persistence) == 1

        restored = ErrorStatistics()
        assert await restored.load_from(persistence) == 1
        assert restored.snapshot()["server:500"].count == 2
