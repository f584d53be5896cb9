"""Service builder that knows how to mount the task endpoints."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, List, Self

from fastapi import FastAPI

from taskmanager.core.api.crud import CrudPermissions
from taskmanager.core.api.service_builder import BaseServiceBuilder
from taskmanager.modules.task import TaskIn, TaskOut, TaskRouter

from .dependencies import get_task_manager

DEFAULT_TASKS_PREFIX = "/api/tasks"


@dataclass(slots=True)
class _TaskOptions:
    prefix: str = DEFAULT_TASKS_PREFIX
    tags: List[str] = field(default_factory=lambda: ["Tasks"])
    permissions: CrudPermissions = field(default_factory=CrudPermissions)


class ServiceBuilder(BaseServiceBuilder):
    """BaseServiceBuilder plus `with_tasks()`.

    Example:
        app = ServiceBuilder(info=ServiceInfo(display_name="Tasks")).with_health().with_tasks().build()
    """

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._tasks: _TaskOptions | None = None

    def with_tasks(
        self,
        *,
        prefix: str = DEFAULT_TASKS_PREFIX,
        tags: List[str] | None = None,
        permissions: CrudPermissions | None = None,
        allow_create: bool | None = None,
        allow_read: bool | None = None,
        allow_update: bool | None = None,
        allow_delete: bool | None = None,
    ) -> Self:
        """Mount task CRUD endpoints at prefix.

        The allow_* flags take precedence over the matching field of permissions.
        """
        flags = {
            "create": allow_create,
            "read": allow_read,
            "update": allow_update,
            "delete": allow_delete,
        }
        resolved = replace(
            permissions or CrudPermissions(),
            **{name: value for name, value in flags.items() if value is not None},
        )
        self._tasks = _TaskOptions(prefix=prefix, permissions=resolved)
        if tags:
            self._tasks.tags = list(tags)
        return self

    def _validate_module_configuration(self) -> None:
        if self._tasks is not None and not self._tasks.prefix.startswith("/"):
            raise ValueError(f"Task route prefix must start with '/', got '{self._tasks.prefix}'")

    def _register_module_routers(self, app: FastAPI) -> None:
        if self._tasks is None:
            return
        app.include_router(
            TaskRouter.create(
                prefix=self._tasks.prefix,
                tags=self._tasks.tags,
                manager_factory=get_task_manager,
                entity_in_type=TaskIn,
                entity_out_type=TaskOut,
                permissions=self._tasks.permissions,
            )
        )
