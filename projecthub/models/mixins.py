"""Shared columns for SQLAlchemy models."""

from sqlalchemy import Column, DateTime, func


class TimestampMixin:
    """Server-side creation and update timestamps."""

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    @classmethod
    def newest_first(cls) -> tuple:
        """Order by creation time, ties broken by id (SQLite stores whole seconds)."""
        return (cls.created_at.desc(), cls.id.desc())
