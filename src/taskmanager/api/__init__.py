"""FastAPI routers, builders and related presentation logic."""

from taskmanager.core.api import CrudPermissions, CrudRouter, Router
from taskmanager.core.api.middleware import (
    add_error_handlers,
    add_logging_middleware,
    database_error_handler,
    validation_error_handler,
)
from taskmanager.core.api.routers import HealthRouter, HealthState, HealthStatus
from taskmanager.core.api.service_builder import ServiceInfo
from taskmanager.core.api.utilities import build_location_url, run_app
from taskmanager.core.logging import (
    add_request_context,
    clear_request_context,
    configure_logging,
    get_logger,
    reset_request_context,
)
from taskmanager.modules.task import TaskRouter

from .dependencies import get_task_manager
from .service_builder import ServiceBuilder

__all__ = [
    # Base classes
    "Router",
    "CrudRouter",
    "CrudPermissions",
    # Routers
    "HealthRouter",
    "HealthStatus",
    "HealthState",
    "TaskRouter",
    # Dependencies
    "get_task_manager",
    # Middleware
    "add_error_handlers",
    "add_logging_middleware",
    "database_error_handler",
    "validation_error_handler",
    # Logging
    "configure_logging",
    "get_logger",
    "add_request_context",
    "clear_request_context",
    "reset_request_context",
    # Builders
    "ServiceBuilder",
    "ServiceInfo",
    # Utilities
    "build_location_url",
    "run_app",
]
