"""Task CRUD router."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from taskmanager.core.api.crud import CrudPermissions, CrudRouter

from .schemas import TaskIn, TaskOut


class TaskRouter(CrudRouter[TaskIn, TaskOut]):
    """CRUD router for Task entities."""

    def __init__(
        self,
        prefix: str,
        tags: Sequence[str],
        manager_factory: Callable[..., Any],
        entity_in_type: type[TaskIn] = TaskIn,
        entity_out_type: type[TaskOut] = TaskOut,
        permissions: CrudPermissions | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize task router with entity types and manager factory."""
        super().__init__(
            prefix=prefix,
            tags=list(tags),
            entity_in_type=entity_in_type,
            entity_out_type=entity_out_type,
            manager_factory=manager_factory,
            permissions=permissions,
            entity_name="Task",
            **kwargs,
        )
