"""SQLAlchemy models for error statistics persistence."""
from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class ErrorPatternModel(Base):
    """Occurrence statistics for one error fingerprint."""

    __tablename__ = 'error_patterns'

    fingerprint: Mapped[str] = mapped_column(String(255), primary_key=True)
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_seen: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)

    def __repr__(self) -> str:
        return (
            f"<ErrorPatternModel(fingerprint='{self.fingerprint}', "
            f"count={self.count}, last_seen={self.last_seen})>"
        )
