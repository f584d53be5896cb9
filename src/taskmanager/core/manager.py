"""Generic managers translating between Pydantic schemas and ORM entities."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence

from pydantic import BaseModel

from .logging import get_logger
from .models import Entity
from .repository import BaseRepository, SortOrder
from .schemas import EntityIn, EntityOut

logger = get_logger(__name__)


class Manager[InSchemaT: BaseModel, OutSchemaT: BaseModel, IdT](ABC):
    """Abstract schema-level contract mirroring the repository operations."""

    @abstractmethod
    async def save(self, data: InSchemaT) -> OutSchemaT: ...

    @abstractmethod
    async def save_all(self, items: Iterable[InSchemaT]) -> list[OutSchemaT]: ...

    @abstractmethod
    async def find_by_id(self, id: IdT) -> OutSchemaT | None: ...

    @abstractmethod
    async def exists_by_id(self, id: IdT) -> bool: ...

    @abstractmethod
    async def find_all(self, *, sort: Sequence[SortOrder] | None = None) -> list[OutSchemaT]: ...

    @abstractmethod
    async def find_all_by_id(self, ids: Sequence[IdT]) -> list[OutSchemaT]: ...

    @abstractmethod
    async def find_paginated(
        self, page: int, size: int, *, sort: Sequence[SortOrder] | None = None
    ) -> tuple[list[OutSchemaT], int]: ...

    @abstractmethod
    async def count(self) -> int: ...

    @abstractmethod
    async def delete_by_id(self, id: IdT) -> None: ...

    @abstractmethod
    async def delete_all(self) -> None: ...

    @abstractmethod
    async def delete_all_by_id(self, ids: Sequence[IdT]) -> None: ...


class BaseManager[ModelT: Entity, InSchemaT: EntityIn, OutSchemaT: EntityOut, IdT](
    Manager[InSchemaT, OutSchemaT, IdT]
):
    """Repository-backed manager; every mutating call commits its unit of work."""

    def __init__(
        self,
        repo: BaseRepository[ModelT, IdT],
        model_cls: type[ModelT],
        out_schema_cls: type[OutSchemaT],
    ) -> None:
        """Initialize manager with repository, ORM model and output schema."""
        self.repo = repo
        self.model_cls = model_cls
        self.out_schema_cls = out_schema_cls

    async def save(self, data: InSchemaT) -> OutSchemaT:
        """Insert a new entity or fully update the existing one with the same id."""
        entity = await self._apply(data)
        await self.repo.save(entity)
        await self.repo.commit()
        await self.repo.refresh_many([entity])
        logger.info("entity.saved", entity=self.model_cls.__name__, id=entity.id)
        return self._to_output_schema(entity)

    async def save_all(self, items: Iterable[InSchemaT]) -> list[OutSchemaT]:
        entities = [await self._apply(item) for item in items]
        await self.repo.save_all(entities)
        await self.repo.commit()
        await self.repo.refresh_many(entities)
        logger.info("entity.saved_many", entity=self.model_cls.__name__, count=len(entities))
        return [self._to_output_schema(entity) for entity in entities]

    async def find_by_id(self, id: IdT) -> OutSchemaT | None:
        entity = await self.repo.find_by_id(id)
        if entity is None:
            return None
        return self._to_output_schema(entity)

    async def exists_by_id(self, id: IdT) -> bool:
        return await self.repo.exists_by_id(id)

    async def find_all(self, *, sort: Sequence[SortOrder] | None = None) -> list[OutSchemaT]:
        entities = await self.repo.find_all(sort=sort)
        return [self._to_output_schema(entity) for entity in entities]

    async def find_all_by_id(self, ids: Sequence[IdT]) -> list[OutSchemaT]:
        entities = await self.repo.find_all_by_id(ids)
        return [self._to_output_schema(entity) for entity in entities]

    async def find_paginated(
        self, page: int, size: int, *, sort: Sequence[SortOrder] | None = None
    ) -> tuple[list[OutSchemaT], int]:
        entities, total = await self.repo.find_paginated(page, size, sort=sort)
        return [self._to_output_schema(entity) for entity in entities], total

    async def count(self) -> int:
        return await self.repo.count()

    async def delete_by_id(self, id: IdT) -> None:
        await self.repo.delete_by_id(id)
        await self.repo.commit()
        logger.info("entity.deleted", entity=self.model_cls.__name__, id=id)

    async def delete_all(self) -> None:
        await self.repo.delete_all()
        await self.repo.commit()
        logger.info("entity.deleted_all", entity=self.model_cls.__name__)

    async def delete_all_by_id(self, ids: Sequence[IdT]) -> None:
        await self.repo.delete_all_by_id(ids)
        await self.repo.commit()
        logger.info("entity.deleted_many", entity=self.model_cls.__name__, count=len(ids))

    async def _apply(self, data: InSchemaT) -> ModelT:
        """Return the entity to persist: the existing row updated in place, or a new one."""
        values = data.model_dump(exclude={"id"})
        existing = await self.repo.find_by_id(data.id) if data.id is not None else None  # type: ignore[arg-type]
        if existing is None:
            if data.id is not None:
                values["id"] = data.id
            return self.model_cls(**values)

        for key, value in values.items():
            setattr(existing, key, value)
        return existing

    def _to_output_schema(self, entity: ModelT) -> OutSchemaT:
        """Convert ORM entity to output schema."""
        return self.out_schema_cls.model_validate(entity, from_attributes=True)
