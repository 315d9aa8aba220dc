"""SQLAlchemy-based persistence for error statistics."""
import asyncio
import logging
from datetime import UTC, datetime
from pathlib import Path

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from ..statistics import ErrorPatternStats
from .base import StatisticsPersistence
from .models import Base, ErrorPatternModel

logger = logging.getLogger(__name__)


class SQLAlchemyStatisticsPersistence(StatisticsPersistence):
    """SQLAlchemy-based persistence implementation."""

    def __init__(self, database_url: str | None = None):
        """Initialize SQLAlchemy persistence.

        Args:
            database_url: SQLAlchemy database URL. Defaults to SQLite in user data dir.

        """
        super().__init__()
        if database_url is None:
            data_dir = Path.home() / ".learning-platform" / "data"
            data_dir.mkdir(parents=True, exist_ok=True)
            database_url = f"sqlite+aiosqlite:///{data_dir / 'error_statistics.db'}"

        self.database_url = database_url
        self.engine = create_async_engine(database_url, echo=False, pool_pre_ping=True)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False
        )
        self._init_lock = asyncio.Lock()

    async def _setup(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def _ensure_initialized(self) -> None:
        if self._initialized:
            return
        async with self._init_lock:
            await self.initialize()

    async def save(self, patterns: dict[str, ErrorPatternStats]) -> None:
        """Replace stored statistics with ``patterns``."""
        await self._ensure_initialized()

        async with self.session_factory() as session:
            try:
                await session.execute(delete(ErrorPatternModel))
                session.add_all([
                    ErrorPatternModel(
                        fingerprint=fingerprint,
                        count=stats.count,
                        last_seen=stats.last_seen
                    )
                    for fingerprint, stats in patterns.items()
                ])
                await session.commit()
            except Exception as e:
                await session.rollback()
                logger.error(f"Failed to save error statistics: {e}")
                raise

    async def load(self) -> dict[str, ErrorPatternStats]:
        await self._ensure_initialized()

        async with self.session_factory() as session:
            result = await session.execute(select(ErrorPatternModel))
            return {
                model.fingerprint: ErrorPatternStats(model.count, _as_utc(model.last_seen))
                for model in result.scalars().all()
            }

    async def delete(self, fingerprint: str) -> None:
        await self._ensure_initialized()

        async with self.session_factory() as session:
            await session.execute(
                delete(ErrorPatternModel).where(ErrorPatternModel.fingerprint == fingerprint)
            )
            await session.commit()

    async def clear(self) -> None:
        await self._ensure_initialized()

        async with self.session_factory() as session:
            await session.execute(delete(ErrorPatternModel))
            await session.commit()

    async def close(self) -> None:
        """Close database connections."""
        await self.engine.dispose()


def _as_utc(value: datetime) -> datetime:
    # SQLite drops timezone information
    return value if value.tzinfo else value.replace(tzinfo=UTC)
