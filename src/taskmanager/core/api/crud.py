"""Generic CRUD router over a Manager with per-operation permissions."""

# Endpoint signatures use runtime types (entity_in_type), so annotations must not be postponed.

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from fastapi import Depends, Query, Request, Response, status
from pydantic import BaseModel, Field, create_model
from pydantic.alias_generators import to_snake

from taskmanager.core.exceptions import BadRequestError, InvalidIdError, NotFoundError
from taskmanager.core.manager import Manager
from taskmanager.core.repository import SortOrder
from taskmanager.core.schemas import PaginatedResponse

from .pagination import PaginationParams, create_paginated_response, pagination_params
from .router import Router
from .utilities import build_location_url


def _body_schema(entity_in_type: type[BaseModel]) -> type[BaseModel]:
    """Request body for create and update: the input schema with an unchecked id.

    The route decides the id (none on create, the path id on update), so whatever
    the client sends there is accepted and then replaced.
    """
    return create_model(
        f"{entity_in_type.__name__}Body",
        __base__=entity_in_type,
        id=(Any, Field(default=None, description="Ignored, the id is taken from the route")),
    )


@dataclass(slots=True)
class CrudPermissions:
    """Toggles for the CRUD route groups."""

    create: bool = True
    read: bool = True
    update: bool = True
    delete: bool = True


class CrudRouter[InSchemaT: BaseModel, OutSchemaT: BaseModel](Router):
    """Router exposing list/create/read/update/delete endpoints for one entity type."""

    def __init__(
        self,
        prefix: str,
        tags: Sequence[str],
        entity_in_type: type[InSchemaT],
        entity_out_type: type[OutSchemaT],
        manager_factory: Callable[..., Any],
        permissions: CrudPermissions | None = None,
        entity_name: str | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize CRUD router with entity types and manager factory."""
        self.entity_in_type = entity_in_type
        self.body_type = _body_schema(entity_in_type)
        self.entity_out_type = entity_out_type
        self.manager_factory = manager_factory
        self.permissions = permissions or CrudPermissions()
        self.entity_name = entity_name or entity_out_type.__name__.removesuffix("Out")
        super().__init__(prefix=prefix, tags=tags, **kwargs)

    def _register_routes(self) -> None:
        """Register the CRUD endpoints allowed by the permissions."""
        perms = self.permissions
        if perms.create:
            self._register_create_route()
        if perms.read:
            self._register_find_all_route()
            self._register_find_by_id_route()
        if perms.update:
            self._register_update_route()
        if perms.delete:
            self._register_delete_route()

    # --------------------------------------------------------------------- Routes

    def _register_create_route(self) -> None:
        body_type = self.body_type
        manager_dependency = Depends(self.manager_factory)

        async def create(
            request: Request,
            response: Response,
            data: body_type,  # type: ignore[valid-type]
            manager: Manager = manager_dependency,
        ) -> Any:
            # POST always creates, ids are assigned by the database
            created = await manager.save(data.model_copy(update={"id": None}))
            response.headers["Location"] = build_location_url(request, f"/{created.id}")
            return created

        self.router.add_api_route(
            "",
            create,
            methods=["POST"],
            response_model=self.entity_out_type,
            status_code=status.HTTP_201_CREATED,
            summary=f"Create {self.entity_name}",
        )

    def _register_find_all_route(self) -> None:
        manager_dependency = Depends(self.manager_factory)
        out_type = self.entity_out_type

        async def find_all(
            pagination: PaginationParams = Depends(pagination_params),
            sort: str | None = Query(
                default=None,
                description="Comma separated fields to sort by; prefix a field with '-' for descending order",
            ),
            manager: Manager = manager_dependency,
        ) -> Any:
            orders = self._parse_sort(sort)
            try:
                if pagination.is_paginated():
                    page, size = pagination.effective_page, pagination.effective_size
                    items, total = await manager.find_paginated(page, size, sort=orders)
                    return create_paginated_response(items, total, page, size)
                return await manager.find_all(sort=orders)
            except ValueError as e:
                raise BadRequestError(str(e)) from e

        self.router.add_api_route(
            "",
            find_all,
            methods=["GET"],
            response_model=list[out_type] | PaginatedResponse[out_type],  # type: ignore[valid-type]
            summary=f"List {self.entity_name} records",
            description="Returns a plain list, or a pagination envelope when page or size is given",
        )

    def _register_find_by_id_route(self) -> None:
        manager_dependency = Depends(self.manager_factory)

        async def find_by_id(entity_id: str, manager: Manager = manager_dependency) -> Any:
            parsed = self._parse_id(entity_id)
            entity = await manager.find_by_id(parsed)
            if entity is None:
                raise self._not_found(parsed)
            return entity

        self.router.add_api_route(
            "/{entity_id}",
            find_by_id,
            methods=["GET"],
            response_model=self.entity_out_type,
            summary=f"Get {self.entity_name} by id",
        )

    def _register_update_route(self) -> None:
        body_type = self.body_type
        manager_dependency = Depends(self.manager_factory)

        async def update(
            entity_id: str,
            data: body_type,  # type: ignore[valid-type]
            manager: Manager = manager_dependency,
        ) -> Any:
            parsed = self._parse_id(entity_id)
            if not await manager.exists_by_id(parsed):
                raise self._not_found(parsed)
            # The path id wins over any id in the body
            return await manager.save(data.model_copy(update={"id": parsed}))

        self.router.add_api_route(
            "/{entity_id}",
            update,
            methods=["PUT"],
            response_model=self.entity_out_type,
            summary=f"Update {self.entity_name}",
        )

    def _register_delete_route(self) -> None:
        manager_dependency = Depends(self.manager_factory)

        async def delete(entity_id: str, manager: Manager = manager_dependency) -> Response:
            parsed = self._parse_id(entity_id)
            if not await manager.exists_by_id(parsed):
                raise self._not_found(parsed)
            await manager.delete_by_id(parsed)
            return Response(status_code=status.HTTP_204_NO_CONTENT)

        self.router.add_api_route(
            "/{entity_id}",
            delete,
            methods=["DELETE"],
            status_code=status.HTTP_204_NO_CONTENT,
            response_class=Response,
            summary=f"Delete {self.entity_name}",
        )

    # --------------------------------------------------------------------- Helpers

    def _parse_id(self, entity_id: str) -> int:
        """Parse a path id, rejecting anything that is not a positive 64-bit integer."""
        if not (entity_id.isascii() and entity_id.isdigit()) or not 0 < int(entity_id) < 2**63:
            raise InvalidIdError(f"Invalid id '{entity_id}': must be a positive integer")
        return int(entity_id)

    def _not_found(self, entity_id: int) -> NotFoundError:
        return NotFoundError(f"{self.entity_name} with id {entity_id} not found")

    @staticmethod
    def _parse_sort(sort: str | None) -> list[SortOrder]:
        """Parse '?sort=dueDate,-title' into sort orders on model attribute names."""
        if not sort:
            return []
        orders = []
        for part in sort.split(","):
            if not part.strip():
                continue
            order = SortOrder.parse(part)
            orders.append(SortOrder(field=to_snake(order.field), descending=order.descending))
        return orders
