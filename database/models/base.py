"""
Declarative base and shared column mixins.
"""
from datetime import datetime
from typing import Any, Dict

from sqlalchemy import DateTime, func, inspect
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base of the hotness engine tables."""

    def to_dict(self) -> Dict[str, Any]:
        """Column name -> value, for logs and CLI output."""
        return {c.name: getattr(self, c.name) for c in self.__table__.columns}

    def __repr__(self) -> str:
        identity = inspect(self).identity
        key = identity[0] if identity and len(identity) == 1 else identity
        return f"<{self.__class__.__name__}({key})>"


class TimestampMixin:
    """Row creation and last update times (naive UTC, set by the database)."""
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=func.now(),
        nullable=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=func.now(),
        onupdate=func.now(),
        nullable=True
    )
