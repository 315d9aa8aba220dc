"""Persistence implementations for error statistics."""
from .base import StatisticsPersistence
from .memory import MemoryStatisticsPersistence
from .sqlalchemy_persistence import SQLAlchemyStatisticsPersistence

__all__ = [
    'StatisticsPersistence',
    'MemoryStatisticsPersistence',
    'SQLAlchemyStatisticsPersistence'
]
