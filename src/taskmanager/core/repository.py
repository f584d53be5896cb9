"""Generic repository abstraction with a SQLAlchemy implementation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from sqlalchemy import ColumnElement, Select, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Base


@dataclass(frozen=True, slots=True)
class SortOrder:
    """Ordering on a single model attribute."""

    field: str
    descending: bool = False

    @classmethod
    def parse(cls, expression: str) -> SortOrder:
        """Parse 'field' (ascending) or '-field' (descending)."""
        expression = expression.strip()
        if expression.startswith("-"):
            return cls(field=expression[1:].strip(), descending=True)
        return cls(field=expression.lstrip("+").strip())


class Repository[T, IdT](ABC):
    """Abstract persistence contract for one entity type."""

    @abstractmethod
    async def save(self, entity: T) -> T:
        """Add an entity to the unit of work (insert or update)."""
        ...

    @abstractmethod
    async def save_all(self, entities: Iterable[T]) -> Sequence[T]:
        """Add several entities to the unit of work."""
        ...

    @abstractmethod
    async def commit(self) -> None:
        """Commit pending changes."""
        ...

    @abstractmethod
    async def refresh_many(self, entities: Iterable[T]) -> None:
        """Reload entity state from storage."""
        ...

    @abstractmethod
    async def find_by_id(self, id: IdT) -> T | None:
        """Find an entity by primary key."""
        ...

    @abstractmethod
    async def exists_by_id(self, id: IdT) -> bool:
        """Check whether an entity with the given primary key exists."""
        ...

    @abstractmethod
    async def find_all(self, *, sort: Sequence[SortOrder] | None = None) -> Sequence[T]:
        """Find all entities, optionally ordered."""
        ...

    @abstractmethod
    async def find_all_by_id(self, ids: Sequence[IdT]) -> Sequence[T]:
        """Find all entities whose primary key is in ids."""
        ...

    @abstractmethod
    async def find_paginated(
        self, page: int, size: int, *, sort: Sequence[SortOrder] | None = None
    ) -> tuple[Sequence[T], int]:
        """Find one page of entities along with the total count."""
        ...

    @abstractmethod
    async def count(self) -> int:
        """Count all entities."""
        ...

    @abstractmethod
    async def delete(self, entity: T) -> None:
        """Delete an entity."""
        ...

    @abstractmethod
    async def delete_by_id(self, id: IdT) -> None:
        """Delete an entity by primary key."""
        ...

    @abstractmethod
    async def delete_all(self) -> None:
        """Delete all entities."""
        ...

    @abstractmethod
    async def delete_all_by_id(self, ids: Sequence[IdT]) -> None:
        """Delete all entities whose primary key is in ids."""
        ...


class BaseRepository[T: Base, IdT](Repository[T, IdT]):
    """SQLAlchemy-backed repository bound to a session and a model class."""

    def __init__(self, session: AsyncSession, model: type[T]) -> None:
        """Initialize repository with database session and model class."""
        self.s = session
        self.model = model

    # ----------------------------------------------------------------- Writes

    async def save(self, entity: T) -> T:
        self.s.add(entity)
        return entity

    async def save_all(self, entities: Iterable[T]) -> Sequence[T]:
        items = list(entities)
        self.s.add_all(items)
        return items

    async def commit(self) -> None:
        await self.s.commit()

    async def refresh_many(self, entities: Iterable[T]) -> None:
        for entity in entities:
            await self.s.refresh(entity)

    async def delete(self, entity: T) -> None:
        await self.s.delete(entity)

    async def delete_by_id(self, id: IdT) -> None:
        entity = await self.s.get(self.model, id)
        if entity is not None:
            await self.s.delete(entity)

    async def delete_all(self) -> None:
        await self.s.execute(delete(self.model))

    async def delete_all_by_id(self, ids: Sequence[IdT]) -> None:
        if not ids:
            return
        await self.s.execute(delete(self.model).where(self._pk_column().in_(ids)))

    # ----------------------------------------------------------------- Reads

    async def find_by_id(self, id: IdT) -> T | None:
        return await self.s.get(self.model, id)

    async def exists_by_id(self, id: IdT) -> bool:
        stmt = select(self._pk_column()).where(self._pk_column() == id).limit(1)
        result = await self.s.scalars(stmt)
        return result.first() is not None

    async def find_all(self, *, sort: Sequence[SortOrder] | None = None) -> Sequence[T]:
        result = await self.s.scalars(self._ordered(select(self.model), sort))
        return list(result.all())

    async def find_all_by_id(self, ids: Sequence[IdT]) -> Sequence[T]:
        if not ids:
            return []
        stmt = select(self.model).where(self._pk_column().in_(ids)).order_by(self._pk_column())
        result = await self.s.scalars(stmt)
        return list(result.all())

    async def find_paginated(
        self, page: int, size: int, *, sort: Sequence[SortOrder] | None = None
    ) -> tuple[Sequence[T], int]:
        if page < 1:
            raise ValueError(f"Page must be >= 1, got {page}")
        if size < 1:
            raise ValueError(f"Page size must be >= 1, got {size}")

        stmt = self._ordered(select(self.model), sort).offset((page - 1) * size).limit(size)
        result = await self.s.scalars(stmt)
        return list(result.all()), await self.count()

    async def count(self) -> int:
        result = await self.s.scalar(select(func.count()).select_from(self.model))
        return int(result or 0)

    # ----------------------------------------------------------------- Helpers

    def _pk_column(self) -> Any:
        return self.model.__mapper__.primary_key[0]

    def _ordered(self, stmt: Select[tuple[T]], sort: Sequence[SortOrder] | None) -> Select[tuple[T]]:
        """Apply sort orders, falling back to primary-key order for stable results."""
        clauses: list[ColumnElement[Any]] = []
        for order in sort or ():
            column = self.model.__mapper__.columns.get(order.field)
            if column is None:
                raise ValueError(f"Cannot sort {self.model.__name__} by unknown field '{order.field}'")
            clause = column.desc() if order.descending else column.asc()
            clauses.append(clause.nulls_last())
        clauses.append(self._pk_column().asc())
        return stmt.order_by(*clauses)
