"""Declarative base and shared entity columns."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, Integer
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from .types import UTCDateTime, utc_now

# SQLite only autoincrements an INTEGER PRIMARY KEY, other dialects get a 64-bit column
EntityId = BigInteger().with_variant(Integer(), "sqlite")


class Base(AsyncAttrs, DeclarativeBase):
    """Root declarative base for all ORM models."""


class Entity(Base):
    """Abstract base for persisted records with integer id and audit timestamps."""

    __abstract__ = True

    id: Mapped[int] = mapped_column(EntityId, primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now, onupdate=utc_now, nullable=False)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id!r}>"
